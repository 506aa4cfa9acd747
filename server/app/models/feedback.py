"""Customer feedback model definition."""

from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .mixins import CreatedAtMixin, UUIDPrimaryKeyMixin


class Feedback(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """A testimonial; only approved entries are shown publicly."""

    __tablename__ = "feedback"

    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    booking_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    tour_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, rating={self.rating}, approved={self.is_approved})>"
