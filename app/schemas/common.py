"""Shared response shapes."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NamedRef(BaseModel):
    """A populated reference: the referenced record's id and name."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    name: str


class MessageResponse(BaseModel):
    """Envelope for operations that only report an outcome."""

    success: bool = True
    message: str = Field(..., examples=["Blog removed"])


class ErrorResponse(BaseModel):
    """Envelope returned for every error."""

    success: bool = False
    message: str = Field(..., examples=["Blog not found"])
    error: str = Field(..., examples=["RecordNotFoundError"])


def error_example(message: str, error: str, description: str | None = None) -> dict:
    """Build an OpenAPI ``responses`` entry for an error envelope."""
    return {
        "description": description or message,
        "model": ErrorResponse,
        "content": {
            "application/json": {
                "example": {"success": False, "message": message, "error": error},
            },
        },
    }


class HealthResponse(BaseModel):
    """Liveness report with a database connectivity probe."""

    status: str = Field(default="ok", examples=["ok"])
    timestamp: str = Field(..., examples=["2025-01-01T12:00:00+00:00"])
    database: Literal["connected", "disconnected"]
