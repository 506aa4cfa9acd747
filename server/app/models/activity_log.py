"""Audit trail of admin and booking actions."""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base
from .mixins import CreatedAtMixin, UUIDPrimaryKeyMixin

IP_ADDRESS_MAX_LENGTH = 64
USER_AGENT_MAX_LENGTH = 512


class ActivityLog(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """One recorded action against an entity."""

    __tablename__ = "activity_logs"

    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(IP_ADDRESS_MAX_LENGTH), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(USER_AGENT_MAX_LENGTH), nullable=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ActivityLog(id={self.id}, action='{self.action}', "
            f"entity_type='{self.entity_type}', entity_id={self.entity_id})>"
        )
