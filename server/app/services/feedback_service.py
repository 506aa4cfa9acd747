"""Customer testimonials and their moderation."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import reject_constraint_violations
from ..core.exceptions import NotFoundError
from ..models.feedback import Feedback
from ..schemas.feedback import ModerateFeedbackRequest, SubmitFeedbackRequest

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for feedback operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit(self, request: SubmitFeedbackRequest, user_id: Optional[UUID]) -> Feedback:
        """Store a testimonial; it stays hidden until an admin approves it."""
        feedback = Feedback(
            user_id=user_id,
            is_approved=False,
            is_featured=False,
            **request.model_dump(),
        )
        self.db.add(feedback)
        async with reject_constraint_violations(self.db, "feedback", "submit"):
            await self.db.commit()
        await self.db.refresh(feedback)

        logger.info(
            "Feedback submitted",
            extra={"feedback_id": str(feedback.id), "rating": feedback.rating, "anonymous": user_id is None}
        )
        return feedback

    async def list_feedback(self, featured: bool = False, include_pending: bool = False) -> list[Feedback]:
        """
        Feedback newest first.

        Args:
            featured: Only featured entries
            include_pending: Also return unapproved entries (admin moderation queue)
        """
        stmt = select(Feedback)
        if not include_pending:
            stmt = stmt.where(Feedback.is_approved.is_(True))
        if featured:
            stmt = stmt.where(Feedback.is_featured.is_(True))

        result = await self.db.execute(stmt.order_by(Feedback.created_at.desc()))
        return list(result.scalars().all())

    async def get_or_raise(self, feedback_id: UUID) -> Feedback:
        feedback = await self.db.get(Feedback, feedback_id)
        if feedback is None:
            raise NotFoundError(resource_type="feedback", resource_id=str(feedback_id))
        return feedback

    async def moderate(self, request: ModerateFeedbackRequest) -> Feedback:
        """Approve, hide, feature or unfeature a testimonial."""
        feedback = await self.get_or_raise(request.id)

        if request.is_approved is not None:
            feedback.is_approved = request.is_approved
        if request.is_featured is not None:
            feedback.is_featured = request.is_featured

        await self.db.commit()
        await self.db.refresh(feedback)

        logger.info(
            "Feedback moderated",
            extra={
                "feedback_id": str(feedback.id),
                "is_approved": feedback.is_approved,
                "is_featured": feedback.is_featured,
            }
        )
        return feedback

    async def delete(self, feedback_id: UUID) -> None:
        feedback = await self.get_or_raise(feedback_id)
        await self.db.delete(feedback)
        await self.db.commit()
        logger.info("Feedback deleted", extra={"feedback_id": str(feedback_id)})
