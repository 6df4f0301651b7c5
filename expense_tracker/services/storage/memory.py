"""
In-Memory Storage Implementation

Keeps users and expenses in process-local dicts. Used by the test suite
and by `STORAGE_BACKEND=memory` for running without a database.
Data is lost when the process exits.
"""

import threading
from typing import Optional
from uuid import uuid4

from expense_tracker.models.expense import MUTABLE_FIELDS, Expense
from expense_tracker.models.user import User
from expense_tracker.services.storage.interface import (
    DuplicateError,
    ExpenseStorageInterface,
    NotFoundError,
    UserStorageInterface,
)


def _new_id() -> str:
    return uuid4().hex


class InMemoryUserStorage(UserStorageInterface):

    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    async def create_user(self, username: str, password_hash: str) -> User:
        with self._lock:
            if username in self._users:
                raise DuplicateError(f"Username already exists: {username}")
            user = User(id=_new_id(), username=username, password_hash=password_hash)
            self._users[username] = user
        return user.model_copy()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        user = self._users.get(username)
        return user.model_copy() if user else None


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Expenses keyed by id; dict order gives insertion order on listing."""

    def __init__(self):
        self._expenses: dict[str, Expense] = {}
        self._lock = threading.Lock()

    def _find(self, expense_id: str, user_id: Optional[str]) -> Expense:
        expense = self._expenses.get(expense_id)
        if expense is None or (user_id is not None and expense.user_id != user_id):
            raise NotFoundError(f"Expense not found: {expense_id}")
        return expense

    async def create_expense(self, expense: Expense) -> Expense:
        stored = expense.model_copy(update={"id": _new_id()})
        with self._lock:
            self._expenses[stored.id] = stored
        return stored.model_copy()

    async def list_expenses(self, user_id: str) -> list[Expense]:
        with self._lock:
            return [
                e.model_copy() for e in self._expenses.values()
                if e.user_id == user_id
            ]

    async def update_expense(
        self,
        expense_id: str,
        fields: dict,
        user_id: Optional[str] = None,
    ) -> Expense:
        with self._lock:
            current = self._find(expense_id, user_id)
            changes = {k: v for k, v in fields.items() if k in MUTABLE_FIELDS}
            updated = current.model_copy(update=changes)
            self._expenses[expense_id] = updated
        return updated.model_copy()

    async def delete_expense(
        self,
        expense_id: str,
        user_id: Optional[str] = None,
    ) -> Expense:
        with self._lock:
            deleted = self._find(expense_id, user_id)
            del self._expenses[expense_id]
        return deleted

    async def ping(self) -> None:
        return None
