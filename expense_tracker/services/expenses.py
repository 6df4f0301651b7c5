"""
Expense Store Access

Create, list, update and delete expenses, each call scoped by an
owning-user id. One storage call per operation.
"""

from typing import Optional

from expense_tracker.logs import get_logger
from expense_tracker.models.expense import Expense
from expense_tracker.models.requests import (
    ExpenseCreateRequest,
    ExpenseFields,
    RequestValidationError,
)
from expense_tracker.models.user import TokenClaims
from expense_tracker.services.storage import ExpenseStorageInterface


logger = get_logger(__name__)


class ForbiddenError(Exception):
    """The verified user asked to act for a different user."""

    message = "Not allowed to access another user's expenses"


def resolve_owner(
    supplied_user_id: Optional[str],
    claims: Optional[TokenClaims],
) -> str:
    """
    Decide which user an expense request acts for.

    With verified claims the owner is the token's user, and a supplied
    userId must agree with it. Without claims the supplied userId is
    taken as-is and is required.

    Raises:
        RequestValidationError: No claims and no userId
        ForbiddenError: Supplied userId differs from the token's
    """
    if claims is None:
        if not supplied_user_id:
            raise RequestValidationError(
                "userId is required",
                [{"field": "userId", "message": "Field required"}],
            )
        return supplied_user_id

    if supplied_user_id and supplied_user_id != claims.user_id:
        logger.warning(
            "owner_mismatch",
            token_user_id=claims.user_id,
            supplied_user_id=supplied_user_id,
        )
        raise ForbiddenError()
    return claims.user_id


class ExpenseService:
    """
    Expense operations over an expense store.

    `owner_id` on update and delete is optional: when given, records owned
    by anyone else are treated as missing.
    """

    def __init__(self, expense_storage: ExpenseStorageInterface):
        self._storage = expense_storage

    async def list_expenses(self, user_id: str) -> list[Expense]:
        expenses = await self._storage.list_expenses(user_id)
        logger.info("expenses_listed", user_id=user_id, count=len(expenses))
        return expenses

    async def create_expense(
        self,
        request: ExpenseCreateRequest,
        owner_id: str,
    ) -> Expense:
        expense = Expense(userId=owner_id, **request.as_update())
        created = await self._storage.create_expense(expense)
        logger.info("expense_created", expense_id=created.id, user_id=owner_id)
        return created

    async def update_expense(
        self,
        expense_id: str,
        request: ExpenseFields,
        owner_id: Optional[str] = None,
    ) -> Expense:
        """
        Replace title, amount, date and category of an expense.

        Raises:
            NotFoundError: If no such expense (for this owner) exists
        """
        updated = await self._storage.update_expense(
            expense_id,
            request.as_update(),
            user_id=owner_id,
        )
        logger.info("expense_updated", expense_id=expense_id, user_id=updated.user_id)
        return updated

    async def delete_expense(
        self,
        expense_id: str,
        owner_id: Optional[str] = None,
    ) -> Expense:
        deleted = await self._storage.delete_expense(expense_id, user_id=owner_id)
        logger.info("expense_deleted", expense_id=expense_id, user_id=deleted.user_id)
        return deleted
