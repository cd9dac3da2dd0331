"""Donation record stored by the API."""

from datetime import datetime, timezone
from typing import Union

from pydantic import BaseModel, Field, field_validator

Amount = Union[int, float]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Donation(BaseModel):
    """A normalized donation. Immutable once created."""

    id: str = Field(..., min_length=1, examples=["d9f1c2e4-1b7a-4f0e-9f43-5a0d2c9b8e11"])
    donor_name: str = Field(default="Anonymous", examples=["Alice"])
    amount: Amount = Field(default=0, examples=[5000])
    message: str = Field(default="", examples=["Semangat!"])
    created_at: str = Field(default_factory=utc_now_iso)

    class Config:
        frozen = True

    @field_validator("amount")
    @classmethod
    def _amount_not_negative(cls, value: Amount) -> Amount:
        if value < 0:
            raise ValueError("amount must not be negative")
        return value
