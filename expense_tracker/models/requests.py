"""
Request Schemas

One schema per endpoint body or query. Incoming JSON is validated here,
before any service or storage call, and every failure is reported as a
RequestValidationError listing the offending fields.
"""

from typing import Any, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from expense_tracker.models.expense import MUTABLE_FIELDS, Amount


# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


class RequestValidationError(Exception):
    """A request body or query failed schema validation."""

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "RequestValidationError":
        # Request schemas are flat; deeper loc parts are union member tags
        # (amount.int, amount.float), reported once under the field name.
        errors = []
        seen = set()
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "body"
            if field in seen:
                continue
            seen.add(field)
            errors.append({"field": field, "message": err["msg"]})
        return cls("Invalid request", errors)


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class CredentialsRequest(_RequestModel):
    """Body of POST /login."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class RegisterRequest(CredentialsRequest):
    """Body of POST /register."""

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        return v


class ExpenseFields(_RequestModel):
    """The four mutable expense fields; body of PUT /expenses/:id."""

    title: str = Field(..., min_length=1, max_length=200)
    amount: Amount
    date: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)

    def as_update(self) -> dict:
        return self.model_dump(include=set(MUTABLE_FIELDS))


class ExpenseCreateRequest(ExpenseFields):
    """Body of POST /expenses."""

    user_id: Optional[str] = Field(default=None, alias="userId", min_length=1)


class ExpenseListQuery(_RequestModel):
    """Query string of GET /expenses."""

    user_id: Optional[str] = Field(default=None, alias="userId", min_length=1)


RequestT = TypeVar("RequestT", bound=BaseModel)


def parse_request(schema: type[RequestT], data: Any) -> RequestT:
    """
    Validate raw request data against a schema.

    Raises:
        RequestValidationError: If data is not an object or fails validation
    """
    if not isinstance(data, dict):
        raise RequestValidationError(
            "Request body must be a JSON object",
            [{"field": "body", "message": "Expected a JSON object"}],
        )
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError.from_pydantic(e)
