"""Booking service for business logic operations."""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.database import reject_constraint_violations
from ..core.dependencies import CurrentUser, RequestContext
from ..core.exceptions import AdminRequiredError, AuthorizationError, NotFoundError, ValidationError
from ..core.observability import metrics_collector
from ..models.booking import Booking, BookingStatus
from ..schemas.booking import (
    CUSTOMER_EDITABLE_FIELDS,
    CreateBookingRequest,
    DeleteBookingRequest,
    UpdateBookingRequest,
)
from .activity_service import ActivityService
from .tour_service import TourService, compute_total_price

logger = logging.getLogger(__name__)

ENTITY_TYPE = "booking"

# Statuses a customer may set on their own booking
CUSTOMER_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CANCELLED.value})


class BookingNotModifiableError(ValidationError):
    """Exception when a customer edits a booking that has left the pending state."""

    def __init__(self, booking_id: UUID, status: str):
        super().__init__(detail="Can only modify pending bookings")
        self.problem_details.update({
            "booking_id": str(booking_id),
            "status": status,
        })


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tour_service = TourService(db)
        self.activity_service = ActivityService(db)

    async def create_booking(self, request: CreateBookingRequest, user_id: Optional[UUID]) -> Booking:
        """
        Create a pending booking with a server-side price.

        Args:
            request: Normalized booking funnel submission
            user_id: The signed-in customer, or None for anonymous bookings

        Returns:
            Created booking entity, with its tour attached

        Raises:
            NotFoundError: If the requested tour does not exist
        """
        tour = await self.tour_service.get_tour_for_booking(request.tour_id)
        total_price = compute_total_price(tour, request.num_travelers)

        booking = Booking(
            user_id=user_id,
            tour=tour,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            customer_nationality=request.customer_nationality,
            customer_cnic=request.customer_cnic,
            customer_address=request.customer_address,
            travel_date=request.travel_date,
            num_travelers=request.num_travelers,
            special_requests=request.special_requests,
            total_price=total_price,
            status=BookingStatus.PENDING.value,
            is_deleted=False,
        )

        self.db.add(booking)
        await self.db.commit()

        metrics_collector.record_booking_created(priced=total_price is not None)
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": str(booking.id),
                "tour_id": str(booking.tour_id) if booking.tour_id else None,
                "num_travelers": booking.num_travelers,
                "total_price": total_price,
                "anonymous": user_id is None,
            }
        )

        return booking

    async def list_bookings(
        self,
        actor: CurrentUser,
        booking_id: Optional[UUID] = None,
        status: Optional[BookingStatus] = None,
        user_id: Optional[UUID] = None,
        include_deleted: bool = False,
    ) -> list[Booking]:
        """
        List bookings visible to the caller, newest first.

        Non-admins only ever see their own bookings; the ``user_id`` filter is
        honoured for admins only.
        """
        stmt = select(Booking).options(
            selectinload(Booking.tour),
            selectinload(Booking.deal),
        )

        if not include_deleted:
            stmt = stmt.where(Booking.is_deleted.is_(False))
        if booking_id is not None:
            stmt = stmt.where(Booking.id == booking_id)
        if status is not None:
            stmt = stmt.where(Booking.status == BookingStatus(status).value)

        if not actor.is_admin:
            stmt = stmt.where(Booking.user_id == actor.user_id)
        elif user_id is not None:
            stmt = stmt.where(Booking.user_id == user_id)

        stmt = stmt.order_by(Booking.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_booking_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """Get booking by ID."""
        return await self.db.get(Booking, booking_id)

    async def get_booking_by_id_or_raise(self, booking_id: UUID) -> Booking:
        """Get booking by ID or raise NotFoundError."""
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            logger.warning(
                "Booking not found",
                extra={"booking_id": str(booking_id)}
            )
            raise NotFoundError(
                resource_type="booking",
                resource_id=str(booking_id)
            )
        return booking

    async def update_booking(
        self,
        request: UpdateBookingRequest,
        actor: CurrentUser,
        context: RequestContext,
    ) -> Booking | list[Booking]:
        """
        Dispatch a PUT body to bulk update, restore or single update.

        Returns:
            The updated rows for a bulk update, otherwise the single booking
        """
        if request.bulk:
            return await self.bulk_update(request.ids, request.changes(), actor, context)
        if request.restore:
            return await self.restore(request.id, actor, context)
        return await self.update_single(request.id, request.changes(), actor, context)

    async def update_single(
        self,
        booking_id: UUID,
        changes: dict[str, Any],
        actor: CurrentUser,
        context: RequestContext,
    ) -> Booking:
        """
        Update one booking.

        Admins may change any field. Customers may only move the travel date
        or cancel, and only on their own pending bookings.

        Raises:
            AuthorizationError: If a customer targets a booking that is not theirs
            BookingNotModifiableError: If a customer's booking is no longer pending
            NotFoundError: If an admin targets an unknown booking
        """
        booking = await self.get_booking_by_id(booking_id)

        if not actor.is_admin:
            if booking is None or booking.user_id != actor.user_id:
                logger.warning(
                    "Booking update rejected - not the owner",
                    extra={"booking_id": str(booking_id), "user_id": str(actor.user_id)}
                )
                raise AuthorizationError("Forbidden")

            if booking.status != BookingStatus.PENDING.value:
                raise BookingNotModifiableError(booking_id, booking.status)

            changes = {key: value for key, value in changes.items() if key in CUSTOMER_EDITABLE_FIELDS}
            if "status" in changes and changes["status"] not in CUSTOMER_STATUSES:
                raise ValidationError("Customers can only cancel a booking")

        elif booking is None:
            raise NotFoundError(resource_type="booking", resource_id=str(booking_id))

        for key, value in changes.items():
            setattr(booking, key, value)
        booking.updated_at = datetime.utcnow()

        async with reject_constraint_violations(self.db, ENTITY_TYPE, "update"):
            self.activity_service.record(actor.user_id, context, "update", ENTITY_TYPE, booking_id, changes)
            await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_booking_change("update")
        logger.info(
            "Booking updated successfully",
            extra={
                "booking_id": str(booking_id),
                "fields": sorted(changes),
                "by_admin": actor.is_admin,
            }
        )
        return booking

    async def bulk_update(
        self,
        booking_ids: list[UUID],
        changes: dict[str, Any],
        actor: CurrentUser,
        context: RequestContext,
    ) -> list[Booking]:
        """
        Apply the same changes to many bookings in one statement.

        Raises:
            AdminRequiredError: If the caller is not an admin
        """
        self._require_admin(actor)

        stmt = (
            update(Booking)
            .where(Booking.id.in_(booking_ids))
            .values(**changes, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        async with reject_constraint_violations(self.db, ENTITY_TYPE, "bulk update"):
            result = await self.db.execute(stmt)

            self.activity_service.record(
                actor.user_id, context, "bulk_update", ENTITY_TYPE,
                details={"ids": booking_ids, "updates": changes},
            )
            await self.db.commit()

        metrics_collector.record_booking_change("bulk_update", result.rowcount or 0)
        logger.info(
            "Bookings bulk updated",
            extra={
                "requested": len(booking_ids),
                "updated": result.rowcount,
                "fields": sorted(changes),
            }
        )

        refreshed = await self.db.execute(
            select(Booking)
            .where(Booking.id.in_(booking_ids))
            .order_by(Booking.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(refreshed.scalars().all())

    async def restore(self, booking_id: UUID, actor: CurrentUser, context: RequestContext) -> Booking:
        """
        Undo a soft delete.

        Raises:
            AdminRequiredError: If the caller is not an admin
            NotFoundError: If the booking does not exist
        """
        self._require_admin(actor)
        booking = await self.get_booking_by_id_or_raise(booking_id)

        booking.is_deleted = False
        booking.deleted_at = None
        booking.deleted_by = None
        booking.updated_at = datetime.utcnow()

        self.activity_service.record(
            actor.user_id, context, "restore", ENTITY_TYPE, booking_id, {"restored": True}
        )
        await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_booking_change("restore")
        logger.info("Booking restored", extra={"booking_id": str(booking_id)})
        return booking

    async def delete_bookings(
        self,
        request: DeleteBookingRequest,
        actor: CurrentUser,
        context: RequestContext,
    ) -> None:
        """Soft-delete one booking or, with ``bulk``, many."""
        if request.bulk:
            await self.bulk_soft_delete(request.ids, actor, context)
        else:
            await self.soft_delete(request.id, actor, context)

    async def soft_delete(self, booking_id: UUID, actor: CurrentUser, context: RequestContext) -> None:
        """
        Archive one booking; the row is kept and can be restored.

        Raises:
            AdminRequiredError: If the caller is not an admin
            NotFoundError: If the booking does not exist
        """
        self._require_admin(actor)
        booking = await self.get_booking_by_id_or_raise(booking_id)

        now = datetime.utcnow()
        booking.is_deleted = True
        booking.deleted_at = now
        booking.deleted_by = actor.user_id
        booking.updated_at = now

        self.activity_service.record(
            actor.user_id, context, "delete", ENTITY_TYPE, booking_id, {"soft_deleted": True}
        )
        await self.db.commit()

        metrics_collector.record_booking_change("delete")
        logger.info(
            "Booking soft-deleted",
            extra={"booking_id": str(booking_id), "deleted_by": str(actor.user_id)}
        )

    async def bulk_soft_delete(
        self,
        booking_ids: list[UUID],
        actor: CurrentUser,
        context: RequestContext,
    ) -> int:
        """
        Archive many bookings in one statement.

        Returns:
            Number of rows marked deleted
        """
        self._require_admin(actor)

        now = datetime.utcnow()
        stmt = (
            update(Booking)
            .where(Booking.id.in_(booking_ids))
            .values(is_deleted=True, deleted_at=now, deleted_by=actor.user_id, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        self.activity_service.record(
            actor.user_id, context, "bulk_delete", ENTITY_TYPE, details={"ids": booking_ids}
        )
        await self.db.commit()

        deleted_count = result.rowcount or 0
        metrics_collector.record_booking_change("bulk_delete", deleted_count)
        logger.info(
            "Bookings bulk soft-deleted",
            extra={"requested": len(booking_ids), "deleted": deleted_count}
        )
        return deleted_count

    @staticmethod
    def _require_admin(actor: CurrentUser) -> None:
        if not actor.is_admin:
            raise AdminRequiredError()
