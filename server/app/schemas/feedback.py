"""Feedback (testimonial) schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .booking import EMAIL_PATTERN


class SubmitFeedbackRequest(BaseModel):
    """Public testimonial submission; stored unapproved until moderated."""

    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=320)
    rating: int = Field(..., ge=1, le=5, description="Star rating, 1 to 5")
    message: str = Field(..., max_length=5000)
    tour_name: Optional[str] = Field(None, max_length=255)
    booking_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Valid email is required")
        return v

    @field_validator("message")
    @classmethod
    def check_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message is required")
        return v

    @field_validator("tour_name", mode="before")
    @classmethod
    def blank_tour_name(cls, v):
        if v is None:
            return None
        return str(v).strip() or None


class ModerateFeedbackRequest(BaseModel):
    id: UUID
    is_approved: Optional[bool] = None
    is_featured: Optional[bool] = None


class Feedback(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    booking_id: Optional[UUID] = None
    name: str
    email: str
    rating: int
    message: str
    tour_name: Optional[str] = None
    is_approved: bool
    is_featured: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
