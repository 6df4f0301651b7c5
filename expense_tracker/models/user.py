"""
User and Token Models

A User is created once at registration and only ever read afterwards.
The password hash is the only credential material kept; the plaintext
never leaves the request that carried it.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A registered user as kept by the store."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="System-assigned identifier (set by storage)"
    )
    username: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Unique login name"
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        description="bcrypt hash of the password",
        repr=False,
    )


class TokenClaims(BaseModel):
    """
    Identity carried by a verified access token.

    The wire names (userId, username, iat, exp) are the JWT claim names.
    """
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    username: str = Field(..., min_length=1)
    issued_at: int = Field(..., alias="iat")
    expires_at: int = Field(..., alias="exp")
