"""Role assignment and customer profile operations."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentUser, RequestContext
from ..core.exceptions import NotFoundError
from ..models.account import AppRole, Profile, User, UserRole
from ..schemas.account import Profile as ProfileOut
from ..schemas.account import SetRoleRequest, UpdateProfileRequest
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class UserService:
    """Service for account roles and profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity_service = ActivityService(db)

    async def get_user_or_raise(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource_type="user", resource_id=str(user_id))
        return user

    async def set_role(self, request: SetRoleRequest, actor: CurrentUser, context: RequestContext) -> str:
        """
        Grant or revoke the admin capability.

        ``admin`` inserts the admin grant if missing; ``user`` removes it.

        Returns:
            The user's effective role after the change

        Raises:
            NotFoundError: If the user does not exist
        """
        await self.get_user_or_raise(request.user_id)

        existing = await self.db.scalar(
            select(UserRole).where(
                UserRole.user_id == request.user_id,
                UserRole.role == AppRole.ADMIN.value,
            )
        )

        if request.role == AppRole.ADMIN.value:
            if existing is None:
                self.db.add(UserRole(user_id=request.user_id, role=AppRole.ADMIN.value))
        else:
            await self.db.execute(
                delete(UserRole).where(
                    UserRole.user_id == request.user_id,
                    UserRole.role == AppRole.ADMIN.value,
                )
            )

        self.activity_service.record(
            actor.user_id, context, "role_change", "user", request.user_id,
            {"role": request.role, "previous_role": AppRole.ADMIN.value if existing else AppRole.USER.value},
        )
        await self.db.commit()

        logger.info(
            "User role changed",
            extra={"user_id": str(request.user_id), "role": request.role, "changed_by": str(actor.user_id)}
        )
        return request.role

    async def get_profile(self, actor: CurrentUser) -> ProfileOut:
        """The caller's profile; fields are empty until first saved."""
        profile = await self.db.get(Profile, actor.user_id)
        return self._to_schema(actor, profile)

    async def update_profile(self, request: UpdateProfileRequest, actor: CurrentUser) -> ProfileOut:
        """Create or update the caller's profile with the fields supplied."""
        profile = await self.db.get(Profile, actor.user_id)
        if profile is None:
            profile = Profile(id=actor.user_id)
            self.db.add(profile)

        changes = request.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(profile, key, value)

        await self.db.commit()
        await self.db.refresh(profile)

        logger.info(
            "Profile saved",
            extra={"user_id": str(actor.user_id), "fields": sorted(changes)}
        )
        return self._to_schema(actor, profile)

    @staticmethod
    def _to_schema(actor: CurrentUser, profile: Profile | None) -> ProfileOut:
        return ProfileOut(
            id=actor.user_id,
            email=actor.email,
            full_name=profile.full_name if profile else None,
            phone=profile.phone if profile else None,
            avatar_url=profile.avatar_url if profile else None,
            is_admin=actor.is_admin,
        )
