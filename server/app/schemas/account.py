"""Account listing, role assignment and profile schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.account import AppRole


class AdminUser(BaseModel):
    """An account merged with its profile and effective role."""

    id: UUID
    email: str
    created_at: datetime
    last_sign_in_at: Optional[datetime] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: AppRole = AppRole.USER


class SetRoleRequest(BaseModel):
    """Grant (``admin``) or revoke (``user``) the admin capability."""

    model_config = ConfigDict(use_enum_values=True)

    user_id: UUID = Field(..., description="Account to change")
    role: AppRole = Field(..., description="New effective role")


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)
    avatar_url: Optional[str] = Field(None, max_length=1024)


class Profile(BaseModel):
    """The caller's own profile."""

    id: UUID
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
