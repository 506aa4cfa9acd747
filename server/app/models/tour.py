"""Tour model definition."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base
from .mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .destination import Destination
    from .hotel import Hotel


class Tour(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tour entity representing a bookable tour package."""

    __tablename__ = "tours"

    # Tour information
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[str | None] = mapped_column(String(64), nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(32), nullable=True)
    max_group_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    includes: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Pricing; discount_price wins over price when set
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    discount_price: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)

    # Visibility
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    # Foreign keys
    destination_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("destinations.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    hotel_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("hotels.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_tour_price_non_negative"),
        CheckConstraint("discount_price IS NULL OR discount_price >= 0", name="ck_tour_discount_price_non_negative"),
        CheckConstraint("max_group_size IS NULL OR max_group_size > 0", name="ck_tour_max_group_size_positive"),
    )

    # Relationships
    destination: Mapped["Destination | None"] = relationship("Destination")
    hotel: Mapped["Hotel | None"] = relationship("Hotel")

    @property
    def unit_price(self) -> float:
        """Per-traveler price actually charged."""
        return self.discount_price if self.discount_price is not None else self.price

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, title='{self.title}', price={self.price})>"
