"""
Data Models Package

Pydantic models for stored records (users, expenses), token claims and
per-endpoint request schemas.
"""

from expense_tracker.models.expense import MUTABLE_FIELDS, Expense
from expense_tracker.models.requests import (
    MAX_PASSWORD_BYTES,
    CredentialsRequest,
    ExpenseCreateRequest,
    ExpenseFields,
    ExpenseListQuery,
    RegisterRequest,
    RequestValidationError,
    parse_request,
)
from expense_tracker.models.user import TokenClaims, User

__all__ = [
    # Stored records
    "Expense",
    "MUTABLE_FIELDS",
    "TokenClaims",
    "User",
    # Requests
    "CredentialsRequest",
    "ExpenseCreateRequest",
    "ExpenseFields",
    "ExpenseListQuery",
    "MAX_PASSWORD_BYTES",
    "RegisterRequest",
    "RequestValidationError",
    "parse_request",
]
