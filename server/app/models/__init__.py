"""Models module exporting all database models."""

from .account import AppRole, Profile, User, UserRole
from .activity_log import ActivityLog
from .booking import REVENUE_STATUSES, Booking, BookingStatus
from .deal import Deal
from .destination import Destination
from .feedback import Feedback
from .hotel import Hotel
from .idempotency import IdempotencyRecord
from .site_content import SiteContent
from .tour import Tour
from .vehicle import Vehicle

__all__ = [
    # Accounts
    "User",
    "Profile",
    "UserRole",
    "AppRole",

    # Catalog
    "Destination",
    "Hotel",
    "Tour",
    "Deal",
    "Vehicle",

    # Bookings
    "Booking",
    "BookingStatus",
    "REVENUE_STATUSES",

    # Content and audit
    "Feedback",
    "SiteContent",
    "ActivityLog",

    # Idempotency entity
    "IdempotencyRecord",
]
