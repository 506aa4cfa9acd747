"""Admin dashboard aggregates and account overview."""

import logging
import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models.account import AppRole, Profile, User, UserRole
from ..models.booking import REVENUE_STATUSES, Booking, BookingStatus
from ..models.deal import Deal
from ..models.feedback import Feedback
from ..models.tour import Tour
from ..models.vehicle import Vehicle
from ..schemas.account import AdminUser
from ..schemas.stats import DashboardStats

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like a spreadsheet: halves go away from zero for positive values."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def bucket_by_day(timestamps: list[datetime]) -> dict[str, int]:
    """Count timestamps per ``YYYY-MM-DD``."""
    return dict(Counter(ts.date().isoformat() for ts in timestamps))


class StatsService:
    """Read-only aggregate queries for the admin console."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _flag_counts(self, model, column) -> tuple[int, int]:
        """(rows where the flag is true, all rows) for one boolean column."""
        stmt = select(
            func.coalesce(func.sum(case((column.is_(True), 1), else_=0)), 0),
            func.count(),
        ).select_from(model)
        flagged, total = (await self.db.execute(stmt)).one()
        return int(flagged), int(total)

    async def dashboard(self, now: Optional[datetime] = None) -> DashboardStats:
        """
        Compute the dashboard counters.

        Soft-deleted bookings are excluded everywhere. Revenue sums confirmed
        and completed bookings only.
        """
        now = now or datetime.utcnow()
        live = Booking.is_deleted.is_(False)

        status_rows = await self.db.execute(
            select(Booking.status, func.count()).where(live).group_by(Booking.status)
        )
        by_status = {status: count for status, count in status_rows.all()}

        revenue = await self.db.scalar(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                live, Booking.status.in_(REVENUE_STATUSES)
            )
        )

        active_tours, total_tours = await self._flag_counts(Tour, Tour.is_active)
        available_vehicles, total_vehicles = await self._flag_counts(Vehicle, Vehicle.is_available)
        active_deals, total_deals = await self._flag_counts(Deal, Deal.is_active)
        approved_feedback, total_feedback = await self._flag_counts(Feedback, Feedback.is_approved)

        avg_rating = await self.db.scalar(select(func.avg(Feedback.rating)))
        total_users = await self.db.scalar(select(func.count()).select_from(User))

        window_start = now - timedelta(days=settings.stats_window_days)
        recent = await self.db.execute(
            select(Booking.created_at).where(live, Booking.created_at >= window_start)
        )

        stats = DashboardStats(
            total_bookings=sum(by_status.values()),
            pending_bookings=by_status.get(BookingStatus.PENDING.value, 0),
            confirmed_bookings=by_status.get(BookingStatus.CONFIRMED.value, 0),
            completed_bookings=by_status.get(BookingStatus.COMPLETED.value, 0),
            cancelled_bookings=by_status.get(BookingStatus.CANCELLED.value, 0),
            total_revenue=float(revenue or 0),
            active_tours=active_tours,
            total_tours=total_tours,
            available_vehicles=available_vehicles,
            total_vehicles=total_vehicles,
            active_deals=active_deals,
            total_deals=total_deals,
            approved_feedback=approved_feedback,
            total_feedback=total_feedback,
            avg_rating=round_half_up(float(avg_rating)) if avg_rating is not None else 0,
            total_users=total_users or 0,
            bookings_by_date=bucket_by_day(list(recent.scalars().all())),
        )

        logger.info(
            "Dashboard stats computed",
            extra={"total_bookings": stats.total_bookings, "total_revenue": stats.total_revenue}
        )
        return stats

    async def list_users(self) -> list[AdminUser]:
        """Every account merged with its profile and effective role."""
        users = (await self.db.execute(select(User).order_by(User.created_at.desc()))).scalars().all()
        profiles = {
            profile.id: profile
            for profile in (await self.db.execute(select(Profile))).scalars().all()
        }

        roles: dict = {}
        for user_id, role in (await self.db.execute(select(UserRole.user_id, UserRole.role))).all():
            # Admin wins when a user holds several grants
            if roles.get(user_id) != AppRole.ADMIN.value:
                roles[user_id] = role

        overview = []
        for user in users:
            profile = profiles.get(user.id)
            overview.append(AdminUser(
                id=user.id,
                email=user.email,
                created_at=user.created_at,
                last_sign_in_at=user.last_sign_in_at,
                full_name=profile.full_name if profile else None,
                phone=(profile.phone if profile else None) or user.phone,
                avatar_url=profile.avatar_url if profile else None,
                role=roles.get(user.id, AppRole.USER.value),
            ))
        return overview
