"""Common Pydantic schemas."""

from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope used by every read and write endpoint."""

    data: T


class SuccessResponse(BaseModel):
    """Acknowledgement for deletes and fire-and-forget writes."""

    success: bool = True


class IdRequest(BaseModel):
    """Body carrying only the id of the row to act on."""

    id: UUID = Field(..., description="Target row ID")


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Dotted path to the invalid field")
    message: str = Field(..., description="Validation error message")


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")
    error_id: Optional[str] = Field(None, description="Correlation id for server errors")
    violations: Optional[List[Violation]] = Field(None, description="Validation errors")


# Shared OpenAPI error documentation for routers
PROBLEM_RESPONSES = {
    400: {"model": Problem, "description": "Validation error"},
    401: {"model": Problem, "description": "Missing or invalid bearer token"},
    403: {"model": Problem, "description": "Insufficient permissions"},
    404: {"model": Problem, "description": "Resource not found"},
}
