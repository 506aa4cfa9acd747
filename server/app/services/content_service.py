"""Editable site copy."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.site_content import SiteContent

logger = logging.getLogger(__name__)


class ContentService:
    """Key/value content blocks shown on the public site."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_content(self, key: Optional[str] = None) -> dict[str, Any]:
        """
        All content as a ``{key: value}`` map.

        Args:
            key: Limit the map to this key; an unknown key yields an empty map
        """
        stmt = select(SiteContent.key, SiteContent.value).order_by(SiteContent.key)
        if key is not None:
            stmt = stmt.where(SiteContent.key == key)

        result = await self.db.execute(stmt)
        return {row_key: value for row_key, value in result.all()}

    async def upsert(self, key: str, value: Any, actor_id: UUID) -> dict[str, Any]:
        """Insert or replace the value for a key, stamping who changed it."""
        content = await self.db.scalar(select(SiteContent).where(SiteContent.key == key))
        inserted = content is None

        if inserted:
            content = SiteContent(key=key, value=value, updated_by=actor_id)
            self.db.add(content)
        else:
            content.value = value
            content.updated_by = actor_id

        await self.db.commit()

        logger.info(
            "Site content saved",
            extra={"key": key, "inserted": inserted, "updated_by": str(actor_id)}
        )
        return {key: value}
