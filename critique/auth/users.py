from __future__ import annotations

import logging

import bcrypt

from ..errors import ConflictError, UnauthorizedError
from ..storage.document_store import DocumentStore, DuplicateKeyError
from ..storage.models import User

logger = logging.getLogger(__name__)


def hash_password(plain: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


class AuthService:
    """Registration and credential checks against the users collection."""

    def __init__(self, store: DocumentStore, bcrypt_rounds: int = 10) -> None:
        self._store = store
        self._rounds = bcrypt_rounds

    def hash_password(self, plain: str) -> str:
        return hash_password(plain, self._rounds)

    def register(self, email: str, password: str, name: str) -> User:
        email = email.strip().lower()
        if self._store.find_user_by_email(email) is not None:
            raise ConflictError("Email already registered")
        user = User(email=email, password_hash=self.hash_password(password), name=name.strip())
        try:
            created = self._store.add_user(user)
        except DuplicateKeyError:
            raise ConflictError("Email already registered") from None
        logger.info("Registered user %s", created.id)
        return created

    def authenticate(self, email: str, password: str) -> User:
        """Verify credentials. Raises ``UnauthorizedError`` on any mismatch."""
        user = self._store.find_user_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return user
