"""Tour router for the public catalog and admin tour management."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import DatabaseSession
from ..schemas.common import DataResponse
from ..schemas.tour import CreateTourRequest, Tour, TourWithDestination, UpdateTourRequest
from ..services.tour_service import TourService
from .catalog import add_admin_routes

router = APIRouter(prefix="/v1/tours", tags=["tours"])


@router.get("", response_model=DataResponse[list[TourWithDestination]], summary="List tours")
async def list_tours(
    id: Optional[UUID] = Query(None, description="Return only this tour"),
    featured: bool = Query(False, description="Only featured tours"),
    active: bool = Query(False, description="Only tours open for booking"),
    db: AsyncSession = DatabaseSession,
):
    """
    List tours newest first, each with its destination name.

    Boolean filters narrow the result only when set to ``true``.
    """
    tours = await TourService(db).list_items(id, featured=featured, active=active)
    return DataResponse[list[TourWithDestination]](
        data=[TourWithDestination.model_validate(tour) for tour in tours]
    )


add_admin_routes(router, TourService, CreateTourRequest, UpdateTourRequest, Tour)
