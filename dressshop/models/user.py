"""Identity data models for authentication"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from .base import CamelModel, utcnow


class PublicIdentity(CamelModel):
    """Identity view safe to return to clients (no hash, no secret)"""
    id: int
    username: str
    is_admin: bool = False
    two_factor_enabled: bool = False


class Identity(CamelModel):
    """Stored account record"""

    model_config = ConfigDict(frozen=True)  # changes go through IdentityDirectory

    id: int
    username: str = Field(..., min_length=1)
    password_hash: str
    is_admin: bool = False
    two_factor_secret: Optional[str] = None
    two_factor_enabled: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    def to_public(self) -> PublicIdentity:
        return PublicIdentity(
            id=self.id,
            username=self.username,
            is_admin=self.is_admin,
            two_factor_enabled=self.two_factor_enabled,
        )
