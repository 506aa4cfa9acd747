"""Destination model definition."""

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Destination(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A region or place tours travel to."""

    __tablename__ = "destinations"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    best_time: Mapped[str | None] = mapped_column(String(255), nullable=True)
    highlights: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    def __repr__(self) -> str:
        return f"<Destination(id={self.id}, name='{self.name}')>"
