"""Vehicle-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateVehicleRequest(BaseModel):
    """Request schema for adding a rental vehicle."""

    name: str = Field(..., min_length=1, max_length=255, description="Vehicle name, e.g. 'Toyota Prado'")
    type: str = Field(..., min_length=1, max_length=64, description="Vehicle class, e.g. 'SUV'")
    capacity: int = Field(..., ge=1, description="Passenger seats")
    price_per_day: float = Field(..., ge=0, description="Daily rental rate")
    features: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_available: bool = True


class UpdateVehicleRequest(BaseModel):
    """Request schema for a partial vehicle update."""

    id: UUID = Field(..., description="Vehicle to update")
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=64)
    capacity: Optional[int] = Field(None, ge=1)
    price_per_day: Optional[float] = Field(None, ge=0)
    features: Optional[list[str]] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    is_available: Optional[bool] = None


class Vehicle(BaseModel):
    id: UUID
    name: str
    type: str
    capacity: int
    price_per_day: float
    features: Optional[list[str]] = None
    image_url: Optional[str] = None
    is_available: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
