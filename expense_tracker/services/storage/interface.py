"""
Abstract Storage Interface

Services only talk to these interfaces. The MongoDB implementation is used
in production; the in-memory one backs tests and local runs without a
database.

Each call is a single store operation. There is no multi-record atomicity
and no retrying: failures surface to the caller immediately.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.expense import Expense
from expense_tracker.models.user import User


class UserStorageInterface(ABC):
    """Abstract interface for user storage operations."""

    @abstractmethod
    async def create_user(self, username: str, password_hash: str) -> User:
        """
        Persist a new user.

        Args:
            username: Unique login name
            password_hash: Already-hashed password

        Returns:
            The stored user including its assigned id

        Raises:
            DuplicateError: If the username is taken
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        """
        Look a user up by username.

        Returns:
            The user if found, None otherwise
        """
        pass


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def create_expense(self, expense: Expense) -> Expense:
        """
        Persist a new expense.

        Args:
            expense: The expense to save; its id is ignored

        Returns:
            The stored expense including its assigned id

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_expenses(self, user_id: str) -> list[Expense]:
        """
        List every expense owned by a user, in the store's natural order.

        Returns:
            Matching expenses; empty if the user has none
        """
        pass

    @abstractmethod
    async def update_expense(
        self,
        expense_id: str,
        fields: dict,
        user_id: Optional[str] = None,
    ) -> Expense:
        """
        Replace the mutable fields of an expense.

        Args:
            expense_id: The expense's identifier
            fields: New values for title, amount, date and category;
                    other keys (the owner included) are ignored
            user_id: When given, only an expense owned by this user matches

        Returns:
            The expense after the update

        Raises:
            NotFoundError: If no matching expense exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_expense(
        self,
        expense_id: str,
        user_id: Optional[str] = None,
    ) -> Expense:
        """
        Delete an expense.

        Args:
            expense_id: The expense's identifier
            user_id: When given, only an expense owned by this user matches

        Returns:
            The deleted expense

        Raises:
            NotFoundError: If no matching expense exists
            StorageError: If the delete fails
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """
        Check the backend is reachable.

        Raises:
            StoreUnavailableError: If it is not
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StoreUnavailableError(StorageError):
    """Could not reach the storage backend."""
    pass
