"""Registration and login endpoints."""

from flask import Blueprint, jsonify, request

from expense_tracker.api.context import get_components
from expense_tracker.api.tokens import issue_token
from expense_tracker.logs import get_logger
from expense_tracker.models import (
    CredentialsRequest,
    RegisterRequest,
    parse_request,
)
from expense_tracker.services import StorageError


logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
async def register():
    body = parse_request(RegisterRequest, request.get_json(silent=True))
    identity = get_components().identity

    try:
        message = await identity.register(body.username, body.password)
    except StorageError as e:
        logger.error("register_failed", username=body.username, error=str(e))
        return jsonify({"message": "Error registering user"}), 500

    return jsonify({"message": message}), 201


@auth_bp.post("/login")
async def login():
    body = parse_request(CredentialsRequest, request.get_json(silent=True))
    identity = get_components().identity

    try:
        user = await identity.login(body.username, body.password)
    except StorageError as e:
        logger.error("login_error", username=body.username, error=str(e))
        return jsonify({"message": "Error logging in"}), 500

    return jsonify({"message": "Login successful", "token": issue_token(user)}), 200
