"""Uniform response envelope used by every API route."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class Envelope(BaseModel):
    """``{success, data?, error?}`` wrapper."""
    success: bool = Field(..., description="Whether the operation succeeded")
    data: Optional[Any] = Field(None, description="Payload, only meaningful on success")
    error: Optional[str] = Field(None, description="Error message on failure")
    message: Optional[str] = Field(None, description="Informational message")

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "Envelope":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str) -> "Envelope":
        return cls(success=False, error=error)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
