"""Authentication: credentials, TOTP, sessions and the auth gateway"""
