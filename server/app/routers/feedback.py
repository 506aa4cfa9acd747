"""Customer feedback router."""

from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import AdminAuth, CurrentUser, DatabaseSession, OptionalAuth
from ..core.exceptions import AdminRequiredError
from ..schemas.common import PROBLEM_RESPONSES, DataResponse, IdRequest, SuccessResponse
from ..schemas.feedback import Feedback, ModerateFeedbackRequest, SubmitFeedbackRequest
from ..services.feedback_service import FeedbackService

router = APIRouter(prefix="/v1/feedback", tags=["feedback"])


@router.post("", response_model=DataResponse[Feedback], responses=PROBLEM_RESPONSES, summary="Submit feedback")
async def submit_feedback(
    request: SubmitFeedbackRequest,
    current_user: Optional[CurrentUser] = OptionalAuth,
    db: AsyncSession = DatabaseSession,
):
    """Leave a testimonial. It is shown publicly once an admin approves it."""
    feedback = await FeedbackService(db).submit(request, current_user.user_id if current_user else None)
    return DataResponse[Feedback](data=Feedback.model_validate(feedback))


@router.get("", response_model=DataResponse[list[Feedback]], responses=PROBLEM_RESPONSES, summary="List feedback")
async def list_feedback(
    featured: bool = Query(False, description="Only featured testimonials"),
    include_pending: bool = Query(False, description="Include unapproved entries (admins only)"),
    current_user: Optional[CurrentUser] = OptionalAuth,
    db: AsyncSession = DatabaseSession,
):
    if include_pending and not (current_user and current_user.is_admin):
        raise AdminRequiredError()

    entries = await FeedbackService(db).list_feedback(featured=featured, include_pending=include_pending)
    return DataResponse[list[Feedback]](data=[Feedback.model_validate(entry) for entry in entries])


@router.put("", response_model=DataResponse[Feedback], responses=PROBLEM_RESPONSES, summary="Moderate feedback")
async def moderate_feedback(
    request: ModerateFeedbackRequest,
    admin: CurrentUser = AdminAuth,
    db: AsyncSession = DatabaseSession,
):
    feedback = await FeedbackService(db).moderate(request)
    return DataResponse[Feedback](data=Feedback.model_validate(feedback))


@router.delete("", response_model=SuccessResponse, responses=PROBLEM_RESPONSES, summary="Delete feedback")
async def delete_feedback(
    request: IdRequest,
    admin: CurrentUser = AdminAuth,
    db: AsyncSession = DatabaseSession,
):
    await FeedbackService(db).delete(request.id)
    return SuccessResponse()
