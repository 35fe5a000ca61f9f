"""
Password credential hashing.

Credentials are bcrypt modular-crypt strings: ``$2b$<cost>$`` followed by
the 22-character salt and the 31-character derived hash, so the salt is
embedded and recoverable from the stored value.
"""

import hmac

import bcrypt

DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a freshly generated salt"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored credential. Never raises."""
    if not password_hash or not isinstance(password, str):
        return False
    try:
        stored = password_hash.encode("ascii")
        derived = bcrypt.hashpw(password.encode("utf-8"), stored)
    except (ValueError, TypeError, UnicodeError):
        return False
    return hmac.compare_digest(derived, stored)
