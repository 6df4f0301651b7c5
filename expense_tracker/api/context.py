"""Request-scoped access to the wired components and the caller's identity."""

from typing import Optional

from flask import current_app
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from expense_tracker.models.user import TokenClaims
from expense_tracker.orchestrator import AppComponents


EXTENSION_KEY = "expense_tracker"


def get_components() -> AppComponents:
    return current_app.extensions[EXTENSION_KEY]


def current_claims() -> Optional[TokenClaims]:
    """
    Identity of the caller for /expenses routes.

    Returns None when ownership enforcement is off. Otherwise the request
    must carry a valid bearer token; a missing or bad one ends the request
    with 401 through the handlers registered in api.tokens.
    """
    if not get_components().settings.app.enforce_expense_ownership:
        return None

    verify_jwt_in_request()
    return TokenClaims.model_validate(get_jwt())
