"""Booking router: the public funnel and the booking lifecycle."""

import logging
from typing import Any, Awaitable, Callable, Optional, Union
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import (
    AuditContext,
    CurrentUser,
    DatabaseSession,
    IdempotencyKey,
    OptionalAuth,
    RequestContext,
    RequiredAuth,
)
from ..models.booking import BookingStatus
from ..schemas.booking import (
    Booking,
    BookingDetail,
    BookingReceipt,
    CreateBookingRequest,
    CreateBookingResponse,
    DeleteBookingRequest,
    UpdateBookingRequest,
)
from ..schemas.common import PROBLEM_RESPONSES, DataResponse, SuccessResponse
from ..services.booking_service import BookingService
from ..services.email_templates import BookingEmailDetails
from ..services.idempotency_service import IdempotencyService
from ..services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/bookings", tags=["bookings"])


def get_notification_service() -> NotificationService:
    return NotificationService()


NOTIFICATIONS_DEPENDENCY = Depends(get_notification_service)


async def _handle_idempotent_operation(
    method: str,
    idempotency_key: Optional[str],
    request_body: dict[str, Any],
    operation_func: Callable[[], Awaitable[dict[str, Any]]],
    db: AsyncSession,
) -> JSONResponse:
    """Run an operation once per Idempotency-Key, replaying the stored response on retries."""
    if not idempotency_key:
        return JSONResponse(status_code=200, content=await operation_func())

    idempotency_service = IdempotencyService(db)

    cached_response = await idempotency_service.check_idempotency(
        idempotency_key=idempotency_key,
        method=method,
        request_body=request_body
    )
    if cached_response:
        status_code, response_body = cached_response
        return JSONResponse(
            status_code=status_code,
            content=response_body,
            headers={"Idempotent-Replayed": "true"}
        )

    response_body = await operation_func()
    await idempotency_service.store_response(
        idempotency_key=idempotency_key,
        method=method,
        request_body=request_body,
        status_code=200,
        response_body=response_body
    )
    return JSONResponse(status_code=200, content=response_body)


@router.post("", response_model=CreateBookingResponse, responses=PROBLEM_RESPONSES, summary="Create a booking")
async def create_booking(
    request: CreateBookingRequest,
    background_tasks: BackgroundTasks,
    current_user: Optional[CurrentUser] = OptionalAuth,
    idempotency_key: Optional[str] = IdempotencyKey,
    notifications: NotificationService = NOTIFICATIONS_DEPENDENCY,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """
    Submit a booking from the public funnel.

    Sign-in is optional; a valid bearer token links the booking to the
    customer. The price is always computed server-side. Confirmation emails
    go out after the response is sent.
    """
    booking_service = BookingService(db)

    async def operation() -> dict[str, Any]:
        user_id = current_user.user_id if current_user else None
        booking = await booking_service.create_booking(request, user_id)

        tour_title = booking.tour.title if booking.tour else None
        background_tasks.add_task(
            notifications.send_booking_notifications,
            BookingEmailDetails.from_booking(booking, tour_title),
        )

        response = CreateBookingResponse(booking=BookingReceipt.model_validate(booking))
        return response.model_dump(mode="json")

    return await _handle_idempotent_operation(
        method="bookings/create",
        idempotency_key=idempotency_key,
        request_body=request.model_dump(mode="json"),
        operation_func=operation,
        db=db,
    )


@router.get(
    "",
    response_model=DataResponse[list[BookingDetail]],
    responses=PROBLEM_RESPONSES,
    summary="List bookings",
)
async def list_bookings(
    id: Optional[UUID] = Query(None, description="Return only this booking"),
    status: Optional[BookingStatus] = Query(None, description="Filter by status"),
    user_id: Optional[UUID] = Query(None, description="Filter by customer (admins only)"),
    include_deleted: bool = Query(False, description="Include soft-deleted bookings"),
    current_user: CurrentUser = RequiredAuth,
    db: AsyncSession = DatabaseSession,
):
    """
    List bookings newest first.

    Customers see only their own bookings. Each booking embeds its tour and
    deal summary.
    """
    bookings = await BookingService(db).list_bookings(
        current_user,
        booking_id=id,
        status=status,
        user_id=user_id,
        include_deleted=include_deleted,
    )
    return DataResponse[list[BookingDetail]](
        data=[BookingDetail.model_validate(booking) for booking in bookings]
    )


@router.put(
    "",
    response_model=DataResponse[Union[list[Booking], Booking]],
    responses=PROBLEM_RESPONSES,
    summary="Update, bulk update or restore bookings",
)
async def update_booking(
    request: UpdateBookingRequest,
    current_user: CurrentUser = RequiredAuth,
    context: RequestContext = AuditContext,
    db: AsyncSession = DatabaseSession,
):
    """
    Change bookings.

    - ``{bulk: true, ids, ...}``: admin bulk update
    - ``{restore: true, id}``: admin restore of a soft-deleted booking
    - ``{id, ...}``: single update; customers may only move the travel date
      or cancel their own pending bookings
    """
    result = await BookingService(db).update_booking(request, current_user, context)

    if isinstance(result, list):
        return DataResponse[list[Booking]](data=[Booking.model_validate(booking) for booking in result])
    return DataResponse[Booking](data=Booking.model_validate(result))


@router.delete("", response_model=SuccessResponse, responses=PROBLEM_RESPONSES, summary="Soft-delete bookings")
async def delete_booking(
    request: DeleteBookingRequest,
    current_user: CurrentUser = RequiredAuth,
    context: RequestContext = AuditContext,
    db: AsyncSession = DatabaseSession,
):
    """Archive one booking (``{id}``) or many (``{bulk: true, ids}``). Admin only."""
    await BookingService(db).delete_bookings(request, current_user, context)
    return SuccessResponse()
