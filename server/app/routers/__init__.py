"""FastAPI routers package."""

from .booking import router as booking_router
from .catalog import deals_router, destinations_router, hotels_router, vehicles_router
from .content import router as content_router
from .feedback import router as feedback_router
from .health import router as health_router
from .metrics import router as metrics_router
from .stats import router as stats_router
from .tour import router as tour_router
from .users import router as users_router

__all__ = [
    "booking_router",
    "content_router",
    "deals_router",
    "destinations_router",
    "feedback_router",
    "health_router",
    "hotels_router",
    "metrics_router",
    "stats_router",
    "tour_router",
    "users_router",
    "vehicles_router",
]
