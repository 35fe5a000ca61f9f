"""Authenticated session record (opaque token)"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .base import utcnow


class Session(BaseModel):
    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at
