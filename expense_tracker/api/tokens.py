"""
Access tokens.

flask-jwt-extended signs and verifies the tokens. The identity claim is
named `userId` and the username rides along as an extra claim, so a
decoded token reads {userId, username, iat, exp} plus the extension's own
bookkeeping claims.

Every rejection (missing header, bad signature, expired, missing claims)
answers 401 with a `message` body and a Bearer challenge.
"""

from datetime import timedelta

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager, create_access_token
from pydantic import ValidationError

from expense_tracker.config import AuthSettings
from expense_tracker.logs import get_logger
from expense_tracker.models.user import TokenClaims, User


logger = get_logger(__name__)

IDENTITY_CLAIM = "userId"


def _reject(message: str, reason: str):
    logger.info("token_rejected", reason=reason)
    response = jsonify({"message": message})
    response.headers["WWW-Authenticate"] = "Bearer"
    return response, 401


def init_jwt(app: Flask, settings: AuthSettings) -> JWTManager:
    """Configure token handling on the app and register the 401 responses."""
    app.config["JWT_SECRET_KEY"] = settings.secret_key
    app.config["JWT_ALGORITHM"] = settings.algorithm
    app.config["JWT_IDENTITY_CLAIM"] = IDENTITY_CLAIM
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        minutes=settings.token_expire_minutes
    )
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]

    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return _reject("Missing bearer token", reason)

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return _reject("Invalid or expired token", reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        return _reject("Invalid or expired token", "expired")

    @jwt.token_verification_loader
    def has_identity_claims(jwt_header: dict, jwt_payload: dict) -> bool:
        try:
            TokenClaims.model_validate(jwt_payload)
        except ValidationError:
            return False
        return True

    @jwt.token_verification_failed_loader
    def missing_identity_claims(jwt_header: dict, jwt_payload: dict):
        return _reject("Invalid or expired token", "missing identity claims")

    return jwt


def issue_token(user: User) -> str:
    """Sign an access token for a user. Needs an app context."""
    return create_access_token(
        identity=user.id,
        additional_claims={"username": user.username},
    )
