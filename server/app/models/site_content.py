"""Editable site copy stored as key/value pairs."""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .mixins import TimestampMixin, UUIDPrimaryKeyMixin


class SiteContent(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One editable content block, addressed by key."""

    __tablename__ = "site_content"

    key: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_by: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    def __repr__(self) -> str:
        return f"<SiteContent(key='{self.key}')>"
