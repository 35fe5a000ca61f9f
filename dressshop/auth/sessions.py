"""Session store: opaque tokens mapped to identity ids with a fixed lifetime"""

import secrets
from datetime import timedelta
from typing import Optional

from ..models.base import utcnow
from ..models.session import Session
from ..storage.base import Repository
from ..utils.logger import get_logger

logger = get_logger(__name__)

COLLECTION = "sessions"
SESSION_EXPIRY_DAYS = 30


class SessionStore:
    """Persists authenticated sessions in the repository"""

    def __init__(self, repository: Repository, expiry_days: int = SESSION_EXPIRY_DAYS):
        self.repository = repository
        self.lifetime = timedelta(days=expiry_days)

    def create(self, user_id: int) -> Session:
        now = utcnow()
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.lifetime,
        )
        self.repository.insert(COLLECTION, session.model_dump(mode="json"), key=session.token)
        return session

    def get(self, token: str) -> Optional[Session]:
        if not token:
            return None
        record = self.repository.get(COLLECTION, token)
        return Session(**record) if record else None

    def resolve(self, token: str) -> Optional[int]:
        """Return the identity id for a live session; expired sessions are removed"""
        with self.repository.transaction():
            session = self.get(token)
            if session is None:
                return None
            if session.is_expired():
                self.repository.delete(COLLECTION, token)
                return None
            return session.user_id

    def destroy(self, token: str) -> None:
        """Invalidate a session (idempotent)"""
        if token:
            self.repository.delete(COLLECTION, token)

    def purge_expired(self) -> int:
        """Remove expired sessions; returns how many were removed"""
        now = utcnow()
        with self.repository.transaction():
            expired = [
                r["token"] for r in self.repository.all(COLLECTION)
                if Session(**r).is_expired(now)
            ]
            for token in expired:
                self.repository.delete(COLLECTION, token)
        if expired:
            logger.info("Purged expired sessions", count=len(expired))
        return len(expired)
