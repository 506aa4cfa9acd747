"""Service layer package."""

from .activity_service import ActivityService
from .booking_service import BookingService
from .catalog_service import CatalogService, DealService, DestinationService, HotelService, VehicleService
from .content_service import ContentService
from .feedback_service import FeedbackService
from .idempotency_service import IdempotencyService
from .notification_service import NotificationService
from .stats_service import StatsService
from .tour_service import TourService
from .user_service import UserService

__all__ = [
    "ActivityService",
    "BookingService",
    "CatalogService",
    "ContentService",
    "DealService",
    "DestinationService",
    "FeedbackService",
    "HotelService",
    "IdempotencyService",
    "NotificationService",
    "StatsService",
    "TourService",
    "UserService",
    "VehicleService",
]
