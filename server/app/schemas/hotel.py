"""Hotel-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateHotelRequest(BaseModel):
    """Request schema for creating a hotel."""

    name: str = Field(..., min_length=1, max_length=255, description="Hotel name")
    description: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255)
    star_rating: Optional[int] = Field(None, ge=1, le=5, description="Star classification")
    amenities: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_active: bool = True


class UpdateHotelRequest(BaseModel):
    """Request schema for a partial hotel update."""

    id: UUID = Field(..., description="Hotel to update")
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255)
    star_rating: Optional[int] = Field(None, ge=1, le=5)
    amenities: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_active: Optional[bool] = None


class Hotel(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    star_rating: Optional[int] = None
    amenities: Optional[list[str]] = None
    image_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
