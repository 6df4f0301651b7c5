"""Services package."""

from expense_tracker.services.expenses import (
    ExpenseService,
    ForbiddenError,
    resolve_owner,
)
from expense_tracker.services.identity import (
    DuplicateUserError,
    IdentityError,
    IdentityService,
    InvalidCredentialsError,
)
from expense_tracker.services.storage import (
    DuplicateError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
    StoreUnavailableError,
    UserStorageInterface,
)

__all__ = [
    # Identity
    "DuplicateUserError",
    "IdentityError",
    "IdentityService",
    "InvalidCredentialsError",
    # Expenses
    "ExpenseService",
    "ForbiddenError",
    "resolve_owner",
    # Storage
    "DuplicateError",
    "ExpenseStorageInterface",
    "NotFoundError",
    "StorageError",
    "StoreUnavailableError",
    "UserStorageInterface",
]
