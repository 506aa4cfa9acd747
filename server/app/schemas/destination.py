"""Destination-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateDestinationRequest(BaseModel):
    """Request schema for creating a destination."""

    name: str = Field(..., min_length=1, max_length=255, description="Destination name")
    description: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255, description="Region or province")
    best_time: Optional[str] = Field(None, max_length=255, description="Best season to visit")
    highlights: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_featured: bool = False


class UpdateDestinationRequest(BaseModel):
    """Request schema for a partial destination update."""

    id: UUID = Field(..., description="Destination to update")
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255)
    best_time: Optional[str] = Field(None, max_length=255)
    highlights: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_featured: Optional[bool] = None


class Destination(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    best_time: Optional[str] = None
    highlights: Optional[list[str]] = None
    image_url: Optional[str] = None
    is_featured: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
