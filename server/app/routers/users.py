"""Account administration and self-service profile router."""

from fastapi import APIRouter
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import AdminAuth, AuditContext, CurrentUser, DatabaseSession, RequestContext, RequiredAuth
from ..schemas.account import AdminUser, Profile, SetRoleRequest, UpdateProfileRequest
from ..schemas.common import PROBLEM_RESPONSES, DataResponse
from ..services.stats_service import StatsService
from ..services.user_service import UserService

router = APIRouter(tags=["users"])


@router.get(
    "/v1/users",
    response_model=DataResponse[list[AdminUser]],
    responses=PROBLEM_RESPONSES,
    summary="List accounts",
)
async def list_users(
    admin: CurrentUser = AdminAuth,
    db: AsyncSession = DatabaseSession,
):
    return DataResponse[list[AdminUser]](data=await StatsService(db).list_users())


@router.put(
    "/v1/users/role",
    response_model=DataResponse[dict[str, str]],
    responses=PROBLEM_RESPONSES,
    summary="Grant or revoke admin",
)
async def set_user_role(
    request: SetRoleRequest,
    admin: CurrentUser = AdminAuth,
    context: RequestContext = AuditContext,
    db: AsyncSession = DatabaseSession,
):
    """Set a user's role to ``admin`` or back to ``user``. The change is activity-logged."""
    role = await UserService(db).set_role(request, admin, context)
    return DataResponse[dict[str, str]](data={"user_id": str(request.user_id), "role": role})


@router.get("/v1/profile", response_model=DataResponse[Profile], responses=PROBLEM_RESPONSES, summary="My profile")
async def get_profile(
    current_user: CurrentUser = RequiredAuth,
    db: AsyncSession = DatabaseSession,
):
    return DataResponse[Profile](data=await UserService(db).get_profile(current_user))


@router.put("/v1/profile", response_model=DataResponse[Profile], responses=PROBLEM_RESPONSES, summary="Save my profile")
async def update_profile(
    request: UpdateProfileRequest,
    current_user: CurrentUser = RequiredAuth,
    db: AsyncSession = DatabaseSession,
):
    return DataResponse[Profile](data=await UserService(db).update_profile(request, current_user))
