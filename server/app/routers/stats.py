"""Admin dashboard statistics and activity log router."""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.dependencies import AdminAuth, AuditContext, CurrentUser, DatabaseSession, RequestContext
from ..schemas.common import PROBLEM_RESPONSES, DataResponse, SuccessResponse
from ..schemas.stats import ActivityLog, RecordActivityRequest
from ..services.activity_service import ActivityService
from ..services.stats_service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/stats", tags=["stats"])


@router.get("", response_model=None, responses=PROBLEM_RESPONSES, summary="Dashboard statistics")
async def get_stats(
    type: Optional[str] = Query(None, description="'users', 'activity', or omit for the dashboard"),
    admin: CurrentUser = AdminAuth,
    db: AsyncSession = DatabaseSession,
) -> DataResponse:
    """
    Admin console data.

    - no ``type``: dashboard counters (camelCase keys)
    - ``type=users``: every account with profile and role
    - ``type=activity``: the latest activity log entries, newest first
    """
    if type == "users":
        return DataResponse(data=await StatsService(db).list_users())

    if type == "activity":
        entries = await ActivityService(db).recent(settings.activity_log_limit)
        return DataResponse(data=[ActivityLog.model_validate(entry) for entry in entries])

    return DataResponse(data=await StatsService(db).dashboard())


@router.post("", response_model=SuccessResponse, responses=PROBLEM_RESPONSES, summary="Record an activity entry")
async def record_activity(
    request: RecordActivityRequest,
    admin: CurrentUser = AdminAuth,
    context: RequestContext = AuditContext,
    db: AsyncSession = DatabaseSession,
):
    """Record a client-side admin action (exports, views) in the activity log."""
    ActivityService(db).record(
        admin.user_id,
        context,
        request.action,
        request.entity_type,
        request.entity_id,
        request.details,
    )
    await db.commit()
    return SuccessResponse()
