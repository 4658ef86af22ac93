"""
Outcome set reported by mutating operations.

Services return ``Outcome`` values for the idempotence results
(added/removed/already/not-found) and raise errors for everything else;
the API layer turns both into an ``OperationResult`` body.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Outcome(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    ALREADY = "already"
    NOT_FOUND = "not-found"
    UNKNOWN_AGENT = "unknown-agent"
    FORBIDDEN = "forbidden"
    ERROR = "error"


class OperationResult(BaseModel):
    """Response body of every mutating endpoint."""

    outcome: Outcome = Field(..., example=Outcome.ADDED)
    detail: str = Field("", example="Contact added.")
    id: Optional[str] = Field(None, description="Handle created by the operation, if any")
