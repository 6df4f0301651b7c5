"""
Expense endpoints.

With ownership enforcement on, the owner of every operation is the user in
the bearer token. With it off, the owner is whatever userId the request
carries and update/delete act on any record by id.
"""

from flask import Blueprint, jsonify, request

from expense_tracker.api.context import current_claims, get_components
from expense_tracker.logs import get_logger
from expense_tracker.models import (
    ExpenseCreateRequest,
    ExpenseFields,
    ExpenseListQuery,
    parse_request,
)
from expense_tracker.services import NotFoundError, StorageError, resolve_owner


logger = get_logger(__name__)

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.get("/expenses")
async def list_expenses():
    query = parse_request(ExpenseListQuery, request.args.to_dict())
    owner_id = resolve_owner(query.user_id, current_claims())

    try:
        expenses = await get_components().expenses.list_expenses(owner_id)
    except StorageError as e:
        logger.error("list_expenses_failed", user_id=owner_id, error=str(e))
        message = "Failed to fetch expenses"
        return jsonify({"message": message, "error": message}), 500

    return jsonify([e.to_response() for e in expenses]), 200


@expenses_bp.post("/expenses")
async def create_expense():
    claims = current_claims()
    body = parse_request(ExpenseCreateRequest, request.get_json(silent=True))
    owner_id = resolve_owner(body.user_id, claims)

    try:
        expense = await get_components().expenses.create_expense(body, owner_id)
    except StorageError as e:
        logger.error("create_expense_failed", user_id=owner_id, error=str(e))
        return jsonify({"message": "Error adding expense"}), 400

    return jsonify(expense.to_response()), 201


@expenses_bp.put("/expenses/<expense_id>")
async def update_expense(expense_id: str):
    claims = current_claims()
    body = parse_request(ExpenseFields, request.get_json(silent=True))
    owner_id = claims.user_id if claims else None

    try:
        updated = await get_components().expenses.update_expense(
            expense_id, body, owner_id=owner_id
        )
    except NotFoundError:
        raise
    except StorageError as e:
        logger.error("update_expense_failed", expense_id=expense_id, error=str(e))
        return jsonify({"message": "Error updating expense"}), 500

    return jsonify({
        "message": "Expense updated successfully",
        "updatedExpense": updated.to_response(),
    }), 200


@expenses_bp.delete("/expenses/<expense_id>")
async def delete_expense(expense_id: str):
    claims = current_claims()
    owner_id = claims.user_id if claims else None

    try:
        deleted = await get_components().expenses.delete_expense(
            expense_id, owner_id=owner_id
        )
    except NotFoundError:
        raise
    except StorageError as e:
        logger.error("delete_expense_failed", expense_id=expense_id, error=str(e))
        return jsonify({"message": "Error deleting expense"}), 500

    return jsonify({
        "message": "Expense deleted successfully",
        "deletedExpense": deleted.to_response(),
    }), 200
