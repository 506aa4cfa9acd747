"""Admin dashboard statistics and the activity log."""

from datetime import date, datetime

import pytest

from app.models.booking import Booking
from app.models.deal import Deal
from app.models.feedback import Feedback
from app.models.vehicle import Vehicle


def _booking(status: str, total_price, **fields) -> Booking:
    return Booking(
        customer_name="Test Customer",
        customer_email="customer@example.com",
        customer_phone="03001234567",
        travel_date=date(2025, 6, 15),
        num_travelers=1,
        total_price=total_price,
        status=status,
        **fields,
    )


@pytest.mark.asyncio
async def test_stats_require_admin(test_client, customer_headers):
    response = await test_client.get("/v1/stats", headers=customer_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_counts(test_client, test_session, tour, admin_headers):
    test_session.add_all([
        _booking("pending", 10000),
        _booking("confirmed", 20000),
        _booking("completed", 30000),
        _booking("cancelled", 40000),
        _booking("confirmed", None),
        # Archived bookings never count
        _booking("confirmed", 99999, is_deleted=True, deleted_at=datetime.utcnow()),
        Vehicle(name="Prado", type="SUV", capacity=7, price_per_day=18000),
        Vehicle(name="Coaster", type="Bus", capacity=25, price_per_day=30000, is_available=False),
        Deal(title="Eid Special", is_active=True),
        Feedback(name="Ali", email="ali@example.com", rating=5, message="Great", is_approved=True),
        Feedback(name="Zara", email="zara@example.com", rating=4, message="Good"),
    ])
    await test_session.commit()

    response = await test_client.get("/v1/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["totalBookings"] == 5
    assert stats["pendingBookings"] == 1
    assert stats["confirmedBookings"] == 2
    assert stats["completedBookings"] == 1
    assert stats["cancelledBookings"] == 1
    assert stats["totalRevenue"] == 50000
    assert stats["activeTours"] == 1
    assert stats["totalTours"] == 1
    assert stats["availableVehicles"] == 1
    assert stats["totalVehicles"] == 2
    assert stats["activeDeals"] == 1
    assert stats["totalDeals"] == 1
    assert stats["approvedFeedback"] == 1
    assert stats["totalFeedback"] == 2
    assert stats["avgRating"] == 4.5
    # The admin account from the fixture
    assert stats["totalUsers"] == 1
    assert stats["bookingsByDate"] == {datetime.utcnow().date().isoformat(): 5}


@pytest.mark.asyncio
async def test_dashboard_on_empty_database(test_client, admin_headers):
    stats = (await test_client.get("/v1/stats", headers=admin_headers)).json()["data"]

    assert stats["totalBookings"] == 0
    assert stats["totalRevenue"] == 0
    assert stats["avgRating"] == 0
    assert stats["bookingsByDate"] == {}


@pytest.mark.asyncio
async def test_users_overview(test_client, create_user, admin, admin_headers, customer_headers):
    await create_user("noprofile@example.com", phone="03211234567")
    await test_client.put("/v1/profile", json={"full_name": "Ayesha Khan"}, headers=customer_headers)

    response = await test_client.get("/v1/stats", params={"type": "users"}, headers=admin_headers)

    assert response.status_code == 200
    users = {user["email"]: user for user in response.json()["data"]}
    assert users["admin@industours.pk"]["role"] == "admin"
    assert users["ayesha@example.com"]["role"] == "user"
    assert users["ayesha@example.com"]["full_name"] == "Ayesha Khan"
    assert users["noprofile@example.com"]["phone"] == "03211234567"
    assert users["noprofile@example.com"]["full_name"] is None


@pytest.mark.asyncio
async def test_record_client_activity(test_client, admin, admin_headers):
    response = await test_client.post(
        "/v1/stats",
        json={
            "type": "activity",
            "action": "export",
            "entity_type": "bookings",
            "entity_id": 42,
            "details": {"format": "csv", "rows": 12},
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}

    entries = (await test_client.get("/v1/stats", params={"type": "activity"}, headers=admin_headers)).json()["data"]
    assert len(entries) == 1
    assert entries[0]["action"] == "export"
    assert entries[0]["entity_id"] == "42"
    assert entries[0]["user_id"] == str(admin.id)
    assert entries[0]["details"] == {"format": "csv", "rows": 12}


@pytest.mark.asyncio
async def test_record_activity_rejects_unknown_type(test_client, admin_headers):
    response = await test_client.post(
        "/v1/stats",
        json={"type": "metric", "action": "export", "entity_type": "bookings"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid type"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "client_headers, expected_ip",
    [
        ({"CF-Connecting-IP": "198.51.100.4", "X-Real-IP": "192.0.2.9"}, "198.51.100.4"),
        ({"X-Real-IP": "192.0.2.9"}, "127.0.0.1"),
    ],
)
async def test_activity_ip_falls_back_from_cloudflare_to_peer(test_client, admin_headers, client_headers, expected_ip):
    await test_client.post(
        "/v1/stats",
        json={"type": "activity", "action": "export", "entity_type": "bookings"},
        headers={**admin_headers, **client_headers},
    )

    entries = (await test_client.get("/v1/stats", params={"type": "activity"}, headers=admin_headers)).json()["data"]
    assert entries[0]["ip_address"] == expected_ip
