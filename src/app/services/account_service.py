# src/app/services/account_service.py
"""
Account registration and login on top of the users collection.
"""
from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext

from src.app.domain.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.app.domain.models import Account, Record, utc_timestamp
from src.app.infra.db.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_USERS_KEY = "users/user.csv"
DEFAULT_HASH_ROUNDS = 10


def build_password_context(rounds: int = DEFAULT_HASH_ROUNDS) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class AccountService:
    """
    Service for user accounts.

    Responsibilities:
    - Register users with unique username and email
    - Store only a salted bcrypt hash of the password
    - Verify credentials on login
    """

    def __init__(
        self,
        store: RecordStore,
        users_key: str = DEFAULT_USERS_KEY,
        pwd_context: Optional[CryptContext] = None,
    ):
        self._store = store
        self.users_key = users_key
        self._pwd = pwd_context or build_password_context()

    def register(self, username: str, email: str, password: str) -> dict[str, str]:
        """
        Create a new account.

        Returns:
            Public projection ``{"username", "email"}``

        Raises:
            ValidationError: If any field is missing
            ConflictError: If the username or email is already taken
        """
        if not username or not email or not password:
            raise ValidationError("Username, email, and password are required")

        # Hash outside the mutation so the read-modify-write window stays short
        account = Account(
            username=username,
            email=email,
            password=self._pwd.hash(password),
            created_at=utc_timestamp(),
        )

        def append(users: list[Record]) -> list[Record]:
            if any(user.get("username") == username for user in users):
                raise ConflictError("Username already exists")
            if any(user.get("email") == email for user in users):
                raise ConflictError("Email already registered")
            users.append(account.to_record())
            return users

        self._store.mutate(self.users_key, append)
        logger.info("Registered user: username=%s", username)
        return account.public()

    def authenticate(self, username: str, password: str) -> dict[str, str]:
        """
        Check a username/password pair.

        Raises:
            NotFoundError: If no user has registered yet
            InvalidCredentialsError: Unknown username or wrong password
        """
        if not self._store.collection_exists(self.users_key):
            raise NotFoundError("No users found")

        users = self._store.load_collection(self.users_key)
        record = next((user for user in users if user.get("username") == username), None)
        if record is None:
            # Burn a hash anyway so unknown users cost as much as bad passwords
            self._pwd.dummy_verify()
            logger.info("Login failed, unknown user: username=%s", username)
            raise InvalidCredentialsError("User not found")

        account = Account.from_record(record)
        if not self._verify(password or "", account.password):
            logger.info("Login failed, wrong password: username=%s", username)
            raise InvalidCredentialsError("Incorrect password")

        logger.info("Login succeeded: username=%s", username)
        return account.public()

    def _verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._pwd.verify(password, password_hash)
        except ValueError:
            # Stored value is not a recognizable hash
            logger.error("Unrecognized password hash for stored account")
            return False
