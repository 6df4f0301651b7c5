"""
Identity Service

Registers users and checks credentials.

Passwords are hashed with bcrypt at a fixed cost. Signing the access token
for an authenticated user is left to the HTTP layer (expense_tracker.api.tokens).

Unknown usernames and wrong passwords fail with the same error and the
same message.
"""

import asyncio
from typing import Optional

import bcrypt

from expense_tracker.config import AuthSettings
from expense_tracker.logs import get_logger
from expense_tracker.models.requests import MAX_PASSWORD_BYTES
from expense_tracker.models.user import User
from expense_tracker.services.storage import (
    DuplicateError,
    UserStorageInterface,
)


logger = get_logger(__name__)


class IdentityError(Exception):
    """Base exception for identity operations."""

    message = "Authentication error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class DuplicateUserError(IdentityError):
    """A user with this username already exists."""

    message = "User already exists"


class InvalidCredentialsError(IdentityError):
    """Username unknown or password wrong."""

    message = "Invalid credentials"


class IdentityService:
    """
    User registration and credential checks.

    Args:
        user_storage: Where users are kept
        settings: bcrypt cost
    """

    def __init__(
        self,
        user_storage: UserStorageInterface,
        settings: AuthSettings,
    ):
        self._storage = user_storage
        self._settings = settings

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._settings.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def register(self, username: str, password: str) -> str:
        """
        Register a new user.

        Returns:
            Acknowledgment message

        Raises:
            DuplicateUserError: If the username is taken
            StorageError: If the store fails
        """
        if await self._storage.get_user_by_username(username) is not None:
            logger.info("register_rejected", username=username, reason="duplicate")
            raise DuplicateUserError()

        password_hash = await asyncio.to_thread(self.hash_password, password)

        try:
            user = await self._storage.create_user(username, password_hash)
        except DuplicateError:
            # Lost a race with a concurrent registration
            logger.info("register_rejected", username=username, reason="duplicate")
            raise DuplicateUserError()

        logger.info("user_registered", user_id=user.id, username=username)
        return "User registered successfully"

    async def login(self, username: str, password: str) -> User:
        """
        Check credentials.

        Returns:
            The authenticated user

        Raises:
            InvalidCredentialsError: Unknown username or wrong password
            StorageError: If the store fails
        """
        user = await self._storage.get_user_by_username(username)
        if user is None:
            logger.info("login_failed", username=username)
            raise InvalidCredentialsError()

        matches = await asyncio.to_thread(
            self.check_password, password, user.password_hash
        )
        if not matches:
            logger.info("login_failed", username=username)
            raise InvalidCredentialsError()

        logger.info("login_succeeded", user_id=user.id, username=username)
        return user
