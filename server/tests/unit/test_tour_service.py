"""Unit tests for the catalog services."""

from datetime import date
from uuid import uuid4

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.deal import Deal
from app.models.tour import Tour
from app.schemas.tour import CreateTourRequest, UpdateTourRequest
from app.services.catalog_service import DealService
from app.services.tour_service import TourService, compute_total_price


def test_total_price_prefers_discount():
    tour = Tour(title="Naran Kaghan", price=20000, discount_price=17500)

    assert compute_total_price(tour, 2) == 35000


def test_total_price_falls_back_to_list_price():
    tour = Tour(title="Naran Kaghan", price=20000, discount_price=None)

    assert compute_total_price(tour, 3) == 60000


def test_total_price_without_tour():
    assert compute_total_price(None, 4) is None


@pytest.mark.asyncio
async def test_create_tour(test_session):
    service = TourService(test_session)

    tour = await service.create(CreateTourRequest(title="Chitral & Kalash", price=45000))

    assert tour.id is not None
    assert tour.title == "Chitral & Kalash"
    assert tour.is_active is True
    assert tour.created_at is not None


@pytest.mark.asyncio
async def test_get_tour_for_booking(test_session, tour):
    service = TourService(test_session)

    assert await service.get_tour_for_booking(None) is None
    assert (await service.get_tour_for_booking(tour.id)).id == tour.id

    with pytest.raises(NotFoundError):
        await service.get_tour_for_booking(uuid4())


@pytest.mark.asyncio
async def test_update_rejects_discount_above_price(test_session, tour):
    service = TourService(test_session)

    with pytest.raises(ValidationError):
        await service.update(UpdateTourRequest(id=tour.id, price=10000))

    # The rejected change is not left behind
    await test_session.refresh(tour)
    assert tour.price == 15000


@pytest.mark.asyncio
async def test_list_tours_loads_destination(test_session, tour):
    test_session.expunge_all()

    tours = await TourService(test_session).list_items(featured=True)

    assert len(tours) == 1
    assert tours[0].destination.name == "Hunza Valley"


@pytest.mark.asyncio
async def test_expire_deals(test_session):
    test_session.add_all([
        Deal(title="Ended", valid_until=date(2025, 3, 31), is_active=True),
        Deal(title="Ends today", valid_until=date(2025, 4, 1), is_active=True),
        Deal(title="Open ended", valid_until=None, is_active=True),
        Deal(title="Already off", valid_until=date(2025, 1, 1), is_active=False),
    ])
    await test_session.commit()

    expired = await DealService(test_session).expire_deals(today=date(2025, 4, 1))

    assert expired == 1
    active = await DealService(test_session).list_items(active=True)
    assert sorted(deal.title for deal in active) == ["Ends today", "Open ended"]
