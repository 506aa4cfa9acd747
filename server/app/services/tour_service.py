"""Tour service for catalog and pricing operations."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from ..core.exceptions import ValidationError
from ..models.tour import Tour
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)


def compute_total_price(tour: Optional[Tour], num_travelers: int) -> Optional[float]:
    """
    Price a booking server-side.

    The per-traveler price is the tour's discount price when set, otherwise
    its list price. A booking without a tour has no price yet.
    """
    if tour is None:
        return None
    return float(tour.unit_price) * num_travelers


class TourService(CatalogService[Tour]):
    """Service for tour-related operations."""

    model = Tour
    resource_type = "tour"
    boolean_filters = {"featured": "is_featured", "active": "is_active"}

    def _list_statement(self) -> Select:
        # Listings embed the destination name
        return select(Tour).options(selectinload(Tour.destination))

    def _validate(self, item: Tour) -> None:
        if item.discount_price is not None and item.discount_price > item.price:
            logger.warning(
                "Tour update rejected - discount above list price",
                extra={
                    "tour_id": str(item.id),
                    "price": item.price,
                    "discount_price": item.discount_price,
                }
            )
            raise ValidationError("Discount price cannot exceed the regular price")

    async def get_tour_for_booking(self, tour_id: Optional[UUID]) -> Optional[Tour]:
        """
        Resolve the tour a booking refers to.

        Returns:
            The tour, or None when no tour was requested

        Raises:
            NotFoundError: If a tour id was given but does not exist
        """
        if tour_id is None:
            return None
        return await self.get_by_id_or_raise(tour_id)
