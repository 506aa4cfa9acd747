"""Catalog routers: deals, destinations, hotels and vehicles.

Reads are public. Writes are admin-only and take the row id in the body,
so ``DELETE`` carries a JSON ``{"id": ...}`` payload.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import AdminAuth, CurrentUser, DatabaseSession
from ..schemas.common import PROBLEM_RESPONSES, DataResponse, IdRequest, SuccessResponse
from ..schemas.deal import CreateDealRequest, Deal, UpdateDealRequest
from ..schemas.destination import CreateDestinationRequest, Destination, UpdateDestinationRequest
from ..schemas.hotel import CreateHotelRequest, Hotel, UpdateHotelRequest
from ..schemas.vehicle import CreateVehicleRequest, UpdateVehicleRequest, Vehicle
from ..services.catalog_service import (
    CatalogService,
    DealService,
    DestinationService,
    HotelService,
    VehicleService,
)

logger = logging.getLogger(__name__)


def add_admin_routes(
    router: APIRouter,
    service_cls: type[CatalogService],
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    out_model: type[BaseModel],
) -> None:
    """Attach the admin-only POST, PUT and DELETE endpoints for one resource."""
    resource = service_cls.resource_type

    @router.post(
        "",
        response_model=DataResponse[out_model],
        responses=PROBLEM_RESPONSES,
        summary=f"Create a {resource}",
    )
    async def create_item(
        request: create_model,
        admin: CurrentUser = AdminAuth,
        db: AsyncSession = DatabaseSession,
    ):
        item = await service_cls(db).create(request)
        logger.info(
            f"{resource.capitalize()} created by admin",
            extra={"resource_id": str(item.id), "admin_id": str(admin.user_id)}
        )
        return DataResponse[out_model](data=out_model.model_validate(item))

    @router.put(
        "",
        response_model=DataResponse[out_model],
        responses=PROBLEM_RESPONSES,
        summary=f"Update a {resource}",
    )
    async def update_item(
        request: update_model,
        admin: CurrentUser = AdminAuth,
        db: AsyncSession = DatabaseSession,
    ):
        item = await service_cls(db).update(request)
        return DataResponse[out_model](data=out_model.model_validate(item))

    @router.delete(
        "",
        response_model=SuccessResponse,
        responses=PROBLEM_RESPONSES,
        summary=f"Delete a {resource}",
    )
    async def delete_item(
        request: IdRequest,
        admin: CurrentUser = AdminAuth,
        db: AsyncSession = DatabaseSession,
    ):
        await service_cls(db).delete(request.id)
        logger.info(
            f"{resource.capitalize()} deleted by admin",
            extra={"resource_id": str(request.id), "admin_id": str(admin.user_id)}
        )
        return SuccessResponse()


deals_router = APIRouter(prefix="/v1/deals", tags=["deals"])
destinations_router = APIRouter(prefix="/v1/destinations", tags=["destinations"])
hotels_router = APIRouter(prefix="/v1/hotels", tags=["hotels"])
vehicles_router = APIRouter(prefix="/v1/vehicles", tags=["vehicles"])


@deals_router.get("", response_model=DataResponse[list[Deal]], summary="List deals")
async def list_deals(
    id: Optional[UUID] = Query(None, description="Return only this deal"),
    active: bool = Query(False, description="Only active deals"),
    popup: bool = Query(False, description="Only the popup offer(s)"),
    db: AsyncSession = DatabaseSession,
):
    deals = await DealService(db).list_items(id, active=active, popup=popup)
    return DataResponse[list[Deal]](data=[Deal.model_validate(deal) for deal in deals])


@destinations_router.get("", response_model=DataResponse[list[Destination]], summary="List destinations")
async def list_destinations(
    id: Optional[UUID] = Query(None, description="Return only this destination"),
    featured: bool = Query(False, description="Only featured destinations"),
    db: AsyncSession = DatabaseSession,
):
    destinations = await DestinationService(db).list_items(id, featured=featured)
    return DataResponse[list[Destination]](
        data=[Destination.model_validate(destination) for destination in destinations]
    )


@hotels_router.get("", response_model=DataResponse[list[Hotel]], summary="List hotels")
async def list_hotels(
    id: Optional[UUID] = Query(None, description="Return only this hotel"),
    active: bool = Query(False, description="Only active hotels"),
    db: AsyncSession = DatabaseSession,
):
    hotels = await HotelService(db).list_items(id, active=active)
    return DataResponse[list[Hotel]](data=[Hotel.model_validate(hotel) for hotel in hotels])


@vehicles_router.get("", response_model=DataResponse[list[Vehicle]], summary="List vehicles")
async def list_vehicles(
    id: Optional[UUID] = Query(None, description="Return only this vehicle"),
    available: bool = Query(False, description="Only vehicles available for hire"),
    db: AsyncSession = DatabaseSession,
):
    vehicles = await VehicleService(db).list_items(id, available=available)
    return DataResponse[list[Vehicle]](data=[Vehicle.model_validate(vehicle) for vehicle in vehicles])


add_admin_routes(deals_router, DealService, CreateDealRequest, UpdateDealRequest, Deal)
add_admin_routes(destinations_router, DestinationService, CreateDestinationRequest, UpdateDestinationRequest, Destination)
add_admin_routes(hotels_router, HotelService, CreateHotelRequest, UpdateHotelRequest, Hotel)
add_admin_routes(vehicles_router, VehicleService, CreateVehicleRequest, UpdateVehicleRequest, Vehicle)
