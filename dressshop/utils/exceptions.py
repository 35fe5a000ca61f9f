"""Custom exceptions for the dress shop backend"""

from typing import Optional


class DressShopError(Exception):
    """Base exception for the dress shop"""
    pass


class ValidationError(DressShopError):
    """Malformed or unacceptable input"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class EmptyCartError(ValidationError):
    """Checkout attempted with no cart lines"""

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message, field="items")


class NotFoundError(DressShopError):
    """Entity missing by id or number"""
    pass


class UnauthorizedError(DressShopError):
    """No valid session attached"""
    pass


class InvalidCredentialsError(UnauthorizedError):
    """Unknown username or wrong password (deliberately indistinguishable)"""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class ForbiddenError(DressShopError):
    """Authenticated but lacking privilege"""
    pass


class ConflictError(DressShopError):
    """Uniqueness constraint violated"""
    pass


class TwoFactorNotSetUpError(DressShopError):
    """2FA verification requested before a secret was provisioned"""
    pass


class TwoFactorNotEnabledError(DressShopError):
    """2FA disable requested while 2FA is off"""
    pass


class TwoFactorSecretError(DressShopError):
    """Stored TOTP secret is corrupt"""
    pass


class StorageError(DressShopError):
    """Persistence failure"""
    pass


class ConfigError(DressShopError):
    """Configuration error"""
    pass
