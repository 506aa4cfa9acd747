"""Activity log recording and retrieval."""

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import RequestContext
from ..models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for the audit trail of admin and booking actions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def record(
        self,
        actor_id: Optional[UUID],
        context: RequestContext,
        action: str,
        entity_type: str,
        entity_id: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> ActivityLog:
        """
        Stage an activity entry in the current transaction.

        The caller commits, so the entry lands atomically with the change it
        describes.
        """
        entry = ActivityLog(
            user_id=actor_id,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            details=jsonable_encoder(details) if details is not None else None,
        )
        self.db.add(entry)

        logger.info(
            "Activity recorded",
            extra={
                "action": action,
                "entity_type": entity_type,
                "entity_id": entry.entity_id,
                "actor_id": str(actor_id) if actor_id else None,
                "ip_address": context.ip_address,
            }
        )
        return entry

    async def recent(self, limit: int) -> list[ActivityLog]:
        """Latest entries, newest first."""
        stmt = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
