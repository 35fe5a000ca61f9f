"""
Auth gateway: login/logout, identity resolution, authorization gates and
the two-factor setup sequence.

Two-factor authentication is opt-in per identity and is not checked at
login. The authenticated identity is always passed in explicitly.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel

from ..models.session import Session
from ..models.user import Identity, PublicIdentity
from ..services.identity_directory import IdentityDirectory
from ..utils.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    TwoFactorNotEnabledError,
    TwoFactorNotSetUpError,
    UnauthorizedError,
)
from ..utils.logger import get_logger
from . import totp
from .passwords import verify_password
from .sessions import SessionStore

logger = get_logger(__name__)

DEFAULT_ISSUER = "DressShop Admin"


class TwoFactorOutcome(str, Enum):
    ENABLED = "enabled"
    REJECTED = "rejected"


class TwoFactorSetup(BaseModel):
    secret: str
    qr_code: str


class AuthGateway:

    def __init__(
        self,
        directory: IdentityDirectory,
        sessions: SessionStore,
        issuer: str = DEFAULT_ISSUER,
    ):
        self.directory = directory
        self.sessions = sessions
        self.issuer = issuer

    def login(self, username: str, password: str) -> Tuple[Session, PublicIdentity]:
        """Check credentials and issue a new session"""
        user = self.directory.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentialsError()
        session = self.sessions.create(user.id)
        logger.info("Login succeeded", user_id=user.id)
        return session, user.to_public()

    def logout(self, token: Optional[str]) -> None:
        """Destroy the session; logging out twice is fine"""
        self.sessions.destroy(token or "")

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        user_id = self.sessions.resolve(token or "")
        if user_id is None:
            return None
        user = self.directory.get(user_id)
        if user is None:
            # session outlived its identity
            self.sessions.destroy(token or "")
        return user

    def current_identity(self, token: Optional[str]) -> Optional[PublicIdentity]:
        user = self.resolve(token)
        return user.to_public() if user else None

    def require_authenticated(self, token: Optional[str]) -> Identity:
        user = self.resolve(token)
        if user is None:
            raise UnauthorizedError("Unauthorized: Please login to continue")
        return user

    def require_admin(self, identity: Identity) -> Identity:
        if not identity.is_admin:
            raise ForbiddenError("Forbidden: Admin access required")
        return identity

    def begin_two_factor_setup(self, identity: Identity) -> TwoFactorSetup:
        """Provision a pending secret (replacing any earlier pending one)"""
        secret = totp.generate_secret()
        self.directory.set_two_factor_secret(identity.id, secret)
        uri = totp.build_provisioning_uri(identity.username, self.issuer, secret)
        logger.info("2FA setup started", user_id=identity.id)
        return TwoFactorSetup(secret=secret, qr_code=totp.render_qr_data_url(uri))

    def verify_two_factor_setup(self, identity: Identity, code) -> TwoFactorOutcome:
        # re-read so a setup made through another session is seen
        current = self.directory.get(identity.id) or identity
        if not current.two_factor_secret:
            raise TwoFactorNotSetUpError("2FA not set up for this user")
        if not totp.verify_code(code, current.two_factor_secret):
            logger.info("2FA code rejected", user_id=identity.id)
            return TwoFactorOutcome.REJECTED
        self.directory.enable_two_factor(identity.id)
        logger.info("2FA enabled", user_id=identity.id)
        return TwoFactorOutcome.ENABLED

    def disable_two_factor(self, identity: Identity) -> None:
        current = self.directory.get(identity.id) or identity
        if not current.two_factor_enabled:
            raise TwoFactorNotEnabledError("2FA not enabled for this user")
        self.directory.disable_two_factor(identity.id)
        logger.info("2FA disabled", user_id=identity.id)
