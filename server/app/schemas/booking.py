"""Booking-related Pydantic schemas."""

import math
import re
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.booking import BookingStatus

MIN_TRAVELERS = 1
MAX_TRAVELERS = 50

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    return _clean_text(value) or None


def parse_traveler_count(value: Any) -> int:
    """
    Coerce a traveler count to an int in the accepted range.

    Numeric strings and integral floats are accepted; booleans are not.

    Raises:
        ValueError: If the value is not a whole number between 1 and 50
    """
    message = f"Number of travelers must be between {MIN_TRAVELERS} and {MAX_TRAVELERS}"

    if isinstance(value, bool) or value is None:
        raise ValueError(message)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValueError(message) from None
    if not isinstance(value, (int, float)):
        raise ValueError(message)
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise ValueError(message)

    count = int(value)
    if count < MIN_TRAVELERS or count > MAX_TRAVELERS:
        raise ValueError(message)
    return count


class CreateBookingRequest(BaseModel):
    """
    Public booking funnel submission.

    Fields are declared in the order their checks must run so the first
    violation reported is the first failing rule.
    """

    model_config = ConfigDict(extra="ignore")

    customer_name: str = Field("", max_length=255, validate_default=True)
    customer_email: str = Field("", max_length=320, validate_default=True)
    customer_phone: str = Field("", max_length=32, validate_default=True)
    travel_date: date = Field(None, validate_default=True, description="Requested travel date")
    num_travelers: int = Field(None, validate_default=True, description="Group size, 1 to 50")
    tour_id: Optional[UUID] = Field(None, description="Tour being booked, if any")
    customer_nationality: Optional[str] = Field(None, max_length=64)
    customer_cnic: Optional[str] = Field(None, max_length=32)
    customer_address: Optional[str] = Field(None, max_length=2000)
    special_requests: Optional[str] = Field(None, max_length=5000)

    @field_validator("customer_name", mode="before")
    @classmethod
    def check_name(cls, v):
        name = _clean_text(v)
        if len(name) < 2:
            raise ValueError("Name is required")
        return name

    @field_validator("customer_email", mode="before")
    @classmethod
    def check_email(cls, v):
        email = _clean_text(v).lower()
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Valid email is required")
        return email

    @field_validator("customer_phone", mode="before")
    @classmethod
    def check_phone(cls, v):
        phone = _clean_text(v)
        if len(phone) < 7:
            raise ValueError("Valid phone is required")
        return phone

    @field_validator("travel_date", mode="before")
    @classmethod
    def check_travel_date(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Travel date is required")
        return v.strip() if isinstance(v, str) else v

    @field_validator("num_travelers", mode="before")
    @classmethod
    def check_travelers(cls, v):
        return parse_traveler_count(v)

    @field_validator("tour_id", mode="before")
    @classmethod
    def blank_tour_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "customer_nationality",
        "customer_cnic",
        "customer_address",
        "special_requests",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        return _optional_text(v)


# Fields a customer may change on their own pending booking
CUSTOMER_EDITABLE_FIELDS = frozenset({"travel_date", "status"})

_CONTROL_FIELDS = {"id", "ids", "bulk", "restore"}
_REQUIRED_COLUMNS = {"customer_name", "customer_email", "customer_phone", "travel_date", "num_travelers", "status"}


class UpdateBookingRequest(BaseModel):
    """
    Booking update body.

    ``{bulk: true, ids, ...}`` updates many rows, ``{restore: true, id}``
    undoes a soft delete, and ``{id, ...}`` updates one booking.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    id: Optional[UUID] = None
    ids: Optional[list[UUID]] = None
    bulk: bool = False
    restore: bool = False

    tour_id: Optional[UUID] = None
    deal_id: Optional[UUID] = None
    vehicle_id: Optional[UUID] = None
    customer_name: Optional[str] = Field(None, min_length=2, max_length=255)
    customer_email: Optional[str] = Field(None, max_length=320)
    customer_phone: Optional[str] = Field(None, min_length=7, max_length=32)
    customer_nationality: Optional[str] = Field(None, max_length=64)
    customer_cnic: Optional[str] = Field(None, max_length=32)
    customer_address: Optional[str] = Field(None, max_length=2000)
    travel_date: Optional[date] = None
    num_travelers: Optional[int] = Field(None, ge=MIN_TRAVELERS, le=MAX_TRAVELERS)
    special_requests: Optional[str] = Field(None, max_length=5000)
    total_price: Optional[float] = Field(None, ge=0)
    status: Optional[BookingStatus] = None

    @field_validator("customer_email")
    @classmethod
    def check_email(cls, v):
        if v is None:
            return v
        email = v.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Valid email is required")
        return email

    @model_validator(mode="after")
    def check_target(self):
        if self.bulk:
            if not self.ids:
                raise ValueError("Booking ids are required for bulk updates")
        elif self.id is None:
            raise ValueError("Booking id is required")
        return self

    def changes(self) -> dict[str, Any]:
        """Column values the caller explicitly supplied, minus the control keys."""
        values = self.model_dump(exclude_unset=True, exclude=_CONTROL_FIELDS)
        return {
            key: value
            for key, value in values.items()
            if value is not None or key not in _REQUIRED_COLUMNS
        }


class DeleteBookingRequest(BaseModel):
    """Soft-delete body: ``{id}`` or ``{bulk: true, ids}``."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[UUID] = None
    ids: Optional[list[UUID]] = None
    bulk: bool = False

    @model_validator(mode="after")
    def check_target(self):
        if self.bulk:
            if not self.ids:
                raise ValueError("Booking ids are required for bulk deletes")
        elif self.id is None:
            raise ValueError("Booking id is required")
        return self


class BookingTourSummary(BaseModel):
    title: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookingDealSummary(BaseModel):
    title: str
    discount_percent: Optional[int] = None
    code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Booking(BaseModel):
    """Booking response schema."""

    id: UUID
    user_id: Optional[UUID] = None
    tour_id: Optional[UUID] = None
    deal_id: Optional[UUID] = None
    vehicle_id: Optional[UUID] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_nationality: Optional[str] = None
    customer_cnic: Optional[str] = None
    customer_address: Optional[str] = None
    travel_date: date
    num_travelers: int
    special_requests: Optional[str] = None
    total_price: Optional[float] = None
    status: BookingStatus
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetail(Booking):
    """Booking listing entry with tour and deal summaries embedded."""

    tour: Optional[BookingTourSummary] = None
    deal: Optional[BookingDealSummary] = None


class BookingReceipt(BaseModel):
    """What the booking funnel gets back after a successful submission."""

    id: UUID
    created_at: datetime
    total_price: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class CreateBookingResponse(BaseModel):
    booking: BookingReceipt
