"""Dashboard statistics and activity log schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DashboardStats(BaseModel):
    """Admin dashboard counters, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_bookings: int = 0
    pending_bookings: int = 0
    confirmed_bookings: int = 0
    completed_bookings: int = 0
    cancelled_bookings: int = 0
    total_revenue: float = 0
    active_tours: int = 0
    total_tours: int = 0
    available_vehicles: int = 0
    total_vehicles: int = 0
    active_deals: int = 0
    total_deals: int = 0
    approved_feedback: int = 0
    total_feedback: int = 0
    avg_rating: float = 0
    total_users: int = 0
    bookings_by_date: dict[str, int] = Field(default_factory=dict)


class ActivityLog(BaseModel):
    """Activity log entry response schema."""

    id: UUID
    user_id: Optional[UUID] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecordActivityRequest(BaseModel):
    """
    Body for ``POST /v1/stats``.

    Only ``type="activity"`` is understood; anything else is rejected.
    """

    type: str = Field(..., description="Record kind; must be 'activity'")
    action: str = Field(..., min_length=1, max_length=64)
    entity_type: str = Field(..., min_length=1, max_length=64)
    entity_id: Optional[str] = Field(None, max_length=64)
    details: Optional[dict[str, Any]] = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        if v != "activity":
            raise ValueError("Invalid type")
        return v

    @field_validator("entity_id", mode="before")
    @classmethod
    def blank_entity_id(cls, v):
        # Some callers send numeric ids
        if v is None or v == "":
            return None
        return str(v)
