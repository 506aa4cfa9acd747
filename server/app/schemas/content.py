"""Site content schemas."""

from typing import Any

from pydantic import BaseModel, Field


class UpsertContentRequest(BaseModel):
    """Set the value stored under a content key."""

    key: str = Field(..., min_length=1, max_length=128, description="Content block key, e.g. 'hero'")
    value: Any = Field(..., description="Arbitrary JSON value")
