"""Deal-related Pydantic schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _check_window(valid_from: Optional[date], valid_until: Optional[date]) -> None:
    if valid_from and valid_until and valid_from > valid_until:
        raise ValueError("Deal validity must start on or before it ends")


class CreateDealRequest(BaseModel):
    """Request schema for creating a deal."""

    title: str = Field(..., min_length=1, max_length=255, description="Deal headline")
    description: Optional[str] = Field(None, max_length=5000)
    discount_percent: Optional[int] = Field(None, ge=0, le=100, description="Percentage off")
    code: Optional[str] = Field(None, max_length=64, description="Promo code customers quote")
    image_url: Optional[str] = Field(None, max_length=1024)
    is_active: bool = True
    is_popup: bool = Field(False, description="Show as the site-wide offer popup")
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    tour_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_validity_window(self):
        _check_window(self.valid_from, self.valid_until)
        return self


class UpdateDealRequest(BaseModel):
    """Request schema for a partial deal update."""

    id: UUID = Field(..., description="Deal to update")
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    discount_percent: Optional[int] = Field(None, ge=0, le=100)
    code: Optional[str] = Field(None, max_length=64)
    image_url: Optional[str] = Field(None, max_length=1024)
    is_active: Optional[bool] = None
    is_popup: Optional[bool] = None
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    tour_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_validity_window(self):
        _check_window(self.valid_from, self.valid_until)
        return self


class Deal(BaseModel):
    """Deal response schema."""

    id: UUID
    title: str
    description: Optional[str] = None
    discount_percent: Optional[int] = None
    code: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    is_popup: bool
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    tour_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
