"""Vehicle model definition."""

from sqlalchemy import JSON, Boolean, CheckConstraint, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Vehicle(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A rentable vehicle with driver."""

    __tablename__ = "vehicles"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_day: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    features: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_vehicle_capacity_positive"),
        CheckConstraint("price_per_day >= 0", name="ck_vehicle_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name='{self.name}', type='{self.type}')>"
