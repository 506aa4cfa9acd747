"""Tour-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CreateTourRequest(BaseModel):
    """Request schema for creating a tour."""

    title: str = Field(..., min_length=1, max_length=255, description="Tour title")
    description: str | None = Field(None, max_length=5000, description="Tour description")
    duration: str | None = Field(None, max_length=64, description="Human-readable duration, e.g. '5 Days'")
    difficulty: str | None = Field(None, max_length=32, description="Difficulty label")
    price: float = Field(..., ge=0, description="Per-traveler list price")
    discount_price: float | None = Field(None, ge=0, description="Per-traveler sale price")
    max_group_size: int | None = Field(None, ge=1, description="Largest group accepted")
    includes: list[str] | None = Field(None, description="What the package includes")
    image_url: str | None = Field(None, max_length=1024)
    is_featured: bool = False
    is_active: bool = True
    destination_id: UUID | None = None
    hotel_id: UUID | None = None

    @model_validator(mode="after")
    def check_discount(self):
        if self.discount_price is not None and self.discount_price > self.price:
            raise ValueError("Discount price cannot exceed the regular price")
        return self


class UpdateTourRequest(BaseModel):
    """Request schema for a partial tour update."""

    id: UUID = Field(..., description="Tour to update")
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    duration: str | None = Field(None, max_length=64)
    difficulty: str | None = Field(None, max_length=32)
    price: float | None = Field(None, ge=0)
    discount_price: float | None = Field(None, ge=0)
    max_group_size: int | None = Field(None, ge=1)
    includes: list[str] | None = None
    image_url: str | None = Field(None, max_length=1024)
    is_featured: bool | None = None
    is_active: bool | None = None
    destination_id: UUID | None = None
    hotel_id: UUID | None = None


class DestinationName(BaseModel):
    """Destination fields embedded in tour listings."""

    name: str

    model_config = {"from_attributes": True}


class Tour(BaseModel):
    """Tour response schema."""

    id: UUID
    title: str
    description: str | None = None
    duration: str | None = None
    difficulty: str | None = None
    price: float
    discount_price: float | None = None
    max_group_size: int | None = None
    includes: list[str] | None = None
    image_url: str | None = None
    is_featured: bool
    is_active: bool
    destination_id: UUID | None = None
    hotel_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TourWithDestination(Tour):
    """Tour listing entry with its destination name embedded."""

    destination: DestinationName | None = None
