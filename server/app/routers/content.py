"""Site content router."""

from typing import Any, Optional

from fastapi import APIRouter, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import AdminAuth, CurrentUser, DatabaseSession
from ..schemas.common import PROBLEM_RESPONSES, DataResponse
from ..schemas.content import UpsertContentRequest
from ..services.content_service import ContentService

router = APIRouter(prefix="/v1/content", tags=["content"])


@router.get("", response_model=DataResponse[dict[str, Any]], summary="Site content")
async def get_content(
    key: Optional[str] = Query(None, max_length=128, description="Return only this key"),
    db: AsyncSession = DatabaseSession,
):
    """Editable site copy as a ``{key: value}`` map."""
    return DataResponse[dict[str, Any]](data=await ContentService(db).get_content(key))


@router.put("", response_model=DataResponse[dict[str, Any]], responses=PROBLEM_RESPONSES, summary="Save content")
async def upsert_content(
    request: UpsertContentRequest,
    admin: CurrentUser = AdminAuth,
    db: AsyncSession = DatabaseSession,
):
    saved = await ContentService(db).upsert(request.key, request.value, admin.user_id)
    return DataResponse[dict[str, Any]](data=saved)
