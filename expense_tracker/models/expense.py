"""
Expense Model

An expense belongs to exactly one user. The owner is fixed when the record
is created; updates replace the four mutable fields and nothing else.

Input limits (lengths, non-empty strings) live on the request schemas.
This model describes what is stored, so records written by other clients
still load.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat


# Fields an update replaces; the owner is deliberately absent.
MUTABLE_FIELDS = ("title", "amount", "date", "category")

# Integers stay integers so that 4 comes back as 4, not 4.0.
Amount = Union[int, FiniteFloat]


class Expense(BaseModel):
    """
    A stored expense record.

    Serialized with the document field names: _id and userId.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    title: str
    amount: Amount
    date: str = Field(..., description="Caller-supplied date string, format not validated")
    category: str
    user_id: str = Field(..., alias="userId")

    def to_response(self) -> dict:
        """JSON-ready representation returned by the API."""
        return self.model_dump(by_alias=True)
