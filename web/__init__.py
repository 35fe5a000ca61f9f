"""HTTP layer for the dress shop storefront"""
