"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Tagged error body returned for every failed request."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class CountResponse(BaseModel):
    """Outcome of a bulk operation."""

    message: str
    count: int
