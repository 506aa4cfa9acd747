"""Booking model definition."""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base
from .mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .deal import Deal
    from .tour import Tour
    from .vehicle import Vehicle


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that count towards revenue
REVENUE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A customer's tour request, from the public funnel or the admin console."""

    __tablename__ = "bookings"

    # Owner; anonymous funnel bookings have no user
    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    # What was booked
    tour_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("tours.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    deal_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("deals.id", ondelete="SET NULL"),
        nullable=True
    )
    vehicle_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True
    )

    # Customer details
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    customer_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    customer_nationality: Mapped[str | None] = mapped_column(String(64), nullable=True)
    customer_cnic: Mapped[str | None] = mapped_column(String(32), nullable=True)
    customer_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Trip details
    travel_date: Mapped[date] = mapped_column(Date, nullable=False)
    num_travelers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_price: Mapped[float | None] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
        index=True
    )

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    # Constraints
    __table_args__ = (
        CheckConstraint("num_travelers >= 1 AND num_travelers <= 50", name="ck_booking_num_travelers_range"),
        CheckConstraint("total_price IS NULL OR total_price >= 0", name="ck_booking_total_price_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_booking_status_valid",
        ),
    )

    # Relationships
    tour: Mapped["Tour | None"] = relationship("Tour")
    deal: Mapped["Deal | None"] = relationship("Deal")
    vehicle: Mapped["Vehicle | None"] = relationship("Vehicle")

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, tour_id={self.tour_id}, travelers={self.num_travelers}, "
            f"status={self.status}, deleted={self.is_deleted})>"
        )
