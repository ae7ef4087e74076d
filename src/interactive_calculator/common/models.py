"""Pydantic models shared by the calculator session."""
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Command(str, Enum):
    """Named calculator commands accepted by the buffer manager."""

    CLEAR = "clear"
    DELETE = "delete"
    PERCENT = "percent"
    SIGN = "sign"
    EQUALS = "equals"


class HistoryEntry(BaseModel):
    """Represents one committed calculation."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Expression buffer as it was before evaluation")
    result: str = Field(..., description="Formatted result of the expression")
    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique entry identifier")
