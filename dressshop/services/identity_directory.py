"""
Identity directory: account lookup, creation and 2FA field mutation.
Creates the bootstrap admin account on first start.
"""

from typing import Optional

from ..auth.passwords import DEFAULT_ROUNDS, hash_password
from ..models.base import utcnow
from ..models.user import Identity
from ..storage.base import Repository
from ..utils.exceptions import ConflictError, NotFoundError, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

COLLECTION = "users"
# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


class IdentityDirectory:

    def __init__(self, repository: Repository, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.repository = repository
        self.bcrypt_rounds = bcrypt_rounds

    def get(self, user_id: int) -> Optional[Identity]:
        record = self.repository.get(COLLECTION, user_id)
        return Identity(**record) if record else None

    def get_by_username(self, username: str) -> Optional[Identity]:
        record = self.repository.find_one(COLLECTION, username=username)
        return Identity(**record) if record else None

    def create(self, username: str, password: str, is_admin: bool = False) -> Identity:
        """Create an account; the password is stored only as a salted hash"""
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username is required", field="username")
        if not password or len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be between 1 and {MAX_PASSWORD_BYTES} bytes", field="password"
            )
        password_hash = hash_password(password, rounds=self.bcrypt_rounds)

        with self.repository.transaction():
            if self.repository.find_one(COLLECTION, username=username):
                raise ConflictError(f"Username '{username}' already exists")
            record = self.repository.insert(COLLECTION, {
                "username": username,
                "password_hash": password_hash,
                "is_admin": is_admin,
                "two_factor_secret": None,
                "two_factor_enabled": False,
                "created_at": utcnow().isoformat(),
            })
        return Identity(**record)

    def _update(self, user_id: int, **changes) -> Identity:
        record = self.repository.update(COLLECTION, user_id, changes)
        if record is None:
            raise NotFoundError(f"User with ID '{user_id}' not found")
        return Identity(**record)

    def set_two_factor_secret(self, user_id: int, secret: str) -> Identity:
        """Store a pending secret; does not change the enabled flag"""
        return self._update(user_id, two_factor_secret=secret)

    def enable_two_factor(self, user_id: int) -> Identity:
        return self._update(user_id, two_factor_enabled=True)

    def disable_two_factor(self, user_id: int) -> Identity:
        return self._update(user_id, two_factor_enabled=False, two_factor_secret=None)

    def ensure_bootstrap_admin(self, username: str, password: str) -> Identity:
        """Create the admin account if it does not exist yet"""
        with self.repository.transaction():
            existing = self.get_by_username(username)
            if existing:
                return existing
            logger.info("Creating admin account", username=username)
            admin = self.create(username, password, is_admin=True)
        logger.info("Admin account created", user_id=admin.id)
        return admin
