"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage:
MongoDB for deployments and an in-memory store for tests.
"""

from expense_tracker.services.storage.interface import (
    DuplicateError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    UserStorageInterface,
)
from expense_tracker.services.storage.memory import (
    InMemoryExpenseStorage,
    InMemoryUserStorage,
)
from expense_tracker.services.storage.mongo import (
    MongoExpenseStorage,
    MongoStoreClient,
    MongoUserStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StoreUnavailableError",
    # In-memory implementation
    "InMemoryExpenseStorage",
    "InMemoryUserStorage",
    # MongoDB implementation
    "MongoExpenseStorage",
    "MongoStoreClient",
    "MongoUserStorage",
]
