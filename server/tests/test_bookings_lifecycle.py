"""Booking lifecycle: listing, ownership rules, bulk changes, soft delete and audit."""

import uuid
from datetime import date

import pytest
import pytest_asyncio

from app.models.booking import Booking, BookingStatus


@pytest_asyncio.fixture
async def make_booking(test_session, tour):
    """Factory for bookings in a given state, owned by whoever is passed in."""

    async def _make(owner=None, status=BookingStatus.PENDING, name="Ayesha Khan", **fields) -> Booking:
        booking = Booking(
            user_id=owner.id if owner else None,
            tour_id=tour.id,
            customer_name=name,
            customer_email="ayesha@example.com",
            customer_phone="+92 300 1234567",
            travel_date=date(2025, 6, 15),
            num_travelers=2,
            total_price=24000,
            status=status.value,
            **fields,
        )
        test_session.add(booking)
        await test_session.commit()
        return booking

    return _make


async def _activity(test_client, admin_headers):
    response = await test_client.get("/v1/stats", params={"type": "activity"}, headers=admin_headers)
    assert response.status_code == 200
    return response.json()["data"]


@pytest.mark.asyncio
async def test_list_requires_auth(test_client):
    response = await test_client.get("/v1/bookings")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_customers_only_see_their_own_bookings(
    test_client, make_booking, customer, other_customer, customer_headers
):
    mine = await make_booking(customer)
    await make_booking(other_customer, name="Bilal Ahmed")
    await make_booking(None, name="Walk In")

    # user_id is ignored for non-admins
    response = await test_client.get(
        "/v1/bookings", params={"user_id": str(other_customer.id)}, headers=customer_headers
    )

    assert response.status_code == 200
    assert [b["id"] for b in response.json()["data"]] == [str(mine.id)]


@pytest.mark.asyncio
async def test_admin_sees_all_and_can_filter(
    test_client, make_booking, customer, other_customer, admin_headers
):
    await make_booking(customer)
    confirmed = await make_booking(other_customer, status=BookingStatus.CONFIRMED)

    everything = (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"]
    assert len(everything) == 2

    by_status = await test_client.get("/v1/bookings", params={"status": "confirmed"}, headers=admin_headers)
    assert [b["id"] for b in by_status.json()["data"]] == [str(confirmed.id)]

    by_user = await test_client.get(
        "/v1/bookings", params={"user_id": str(other_customer.id)}, headers=admin_headers
    )
    assert [b["id"] for b in by_user.json()["data"]] == [str(confirmed.id)]


@pytest.mark.asyncio
async def test_listing_embeds_tour_summary(test_client, make_booking, customer, customer_headers):
    await make_booking(customer)

    booking = (await test_client.get("/v1/bookings", headers=customer_headers)).json()["data"][0]

    assert booking["tour"] == {"title": "Hunza Valley Explorer", "image_url": None}
    assert booking["deal"] is None


@pytest.mark.asyncio
async def test_customer_can_move_travel_date(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "travel_date": "2025-07-01"},
        headers=customer_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["travel_date"] == "2025-07-01"


@pytest.mark.asyncio
async def test_customer_edits_outside_allowed_fields_are_dropped(
    test_client, make_booking, customer, customer_headers
):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "cancelled", "total_price": 1, "num_travelers": 40},
        headers=customer_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "cancelled"
    assert data["total_price"] == 24000
    assert data["num_travelers"] == 2


@pytest.mark.asyncio
async def test_customer_cannot_confirm_own_booking(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "confirmed"},
        headers=customer_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Customers can only cancel a booking"


@pytest.mark.asyncio
async def test_customer_cannot_touch_someone_elses_booking(
    test_client, make_booking, other_customer, customer_headers
):
    booking = await make_booking(other_customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "cancelled"},
        headers=customer_headers,
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden"


@pytest.mark.asyncio
async def test_customer_unknown_booking_is_forbidden_not_404(test_client, customer_headers):
    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(uuid.uuid4()), "status": "cancelled"},
        headers=customer_headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_customer_cannot_modify_confirmed_booking(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer, status=BookingStatus.CONFIRMED)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "travel_date": "2025-08-01"},
        headers=customer_headers,
    )

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Can only modify pending bookings"
    assert data["status"] == 400
    assert data["booking_id"] == str(booking.id)


@pytest.mark.asyncio
async def test_admin_update_is_logged_with_forwarded_ip(
    test_client, make_booking, customer, admin, admin_headers
):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "confirmed", "total_price": 20000},
        headers={**admin_headers, "X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "admin-console"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "confirmed"
    assert data["total_price"] == 20000

    entries = await _activity(test_client, admin_headers)
    assert len(entries) == 1
    entry = entries[0]
    assert entry["action"] == "update"
    assert entry["entity_type"] == "booking"
    assert entry["entity_id"] == str(booking.id)
    assert entry["user_id"] == str(admin.id)
    assert entry["ip_address"] == "203.0.113.7"
    assert entry["user_agent"] == "admin-console"
    assert entry["details"] == {"status": "confirmed", "total_price": 20000}


@pytest.mark.asyncio
async def test_admin_update_unknown_booking_returns_404(test_client, admin_headers):
    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(uuid.uuid4()), "status": "confirmed"},
        headers=admin_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_update_with_unknown_tour_rejected(test_client, make_booking, customer, tour, admin_headers):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "tour_id": str(uuid.uuid4()), "status": "confirmed"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert "does not exist" in response.json()["detail"]

    # Nothing from the rejected update is kept, audit entry included
    current = (await test_client.get("/v1/bookings", params={"id": str(booking.id)}, headers=admin_headers)).json()
    assert current["data"][0]["status"] == "pending"
    assert current["data"][0]["tour_id"] == str(tour.id)
    assert await _activity(test_client, admin_headers) == []


@pytest.mark.asyncio
async def test_oversized_client_headers_are_cut_to_fit_the_audit_log(
    test_client, make_booking, customer, admin_headers
):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "confirmed"},
        headers={**admin_headers, "User-Agent": "u" * 600, "X-Forwarded-For": "a" * 100 + ", 10.0.0.1"},
    )

    assert response.status_code == 200
    entry = (await _activity(test_client, admin_headers))[0]
    assert entry["user_agent"] == "u" * 512
    assert entry["ip_address"] == "a" * 64


@pytest.mark.asyncio
async def test_update_without_id_rejected(test_client, admin_headers):
    response = await test_client.put("/v1/bookings", json={"status": "confirmed"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Booking id is required"


@pytest.mark.asyncio
async def test_invalid_status_rejected(test_client, make_booking, customer, admin_headers):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"id": str(booking.id), "status": "shipped"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["violations"][0]["path"] == "status"


@pytest.mark.asyncio
async def test_bulk_update(test_client, make_booking, customer, admin_headers):
    first = await make_booking(customer)
    second = await make_booking(customer, name="Sara Malik")
    untouched = await make_booking(customer, name="Omar Farooq")

    response = await test_client.put(
        "/v1/bookings",
        json={"bulk": True, "ids": [str(first.id), str(second.id)], "status": "confirmed"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert {b["id"] for b in updated} == {str(first.id), str(second.id)}
    assert all(b["status"] == "confirmed" for b in updated)

    pending = await test_client.get("/v1/bookings", params={"status": "pending"}, headers=admin_headers)
    assert [b["id"] for b in pending.json()["data"]] == [str(untouched.id)]

    entry = (await _activity(test_client, admin_headers))[0]
    assert entry["action"] == "bulk_update"
    assert entry["entity_id"] is None
    assert sorted(entry["details"]["ids"]) == sorted([str(first.id), str(second.id)])
    assert entry["details"]["updates"] == {"status": "confirmed"}


@pytest.mark.asyncio
async def test_bulk_update_with_unknown_deal_rejected(test_client, make_booking, customer, admin_headers):
    first = await make_booking(customer)
    second = await make_booking(customer, name="Sara Malik")

    response = await test_client.put(
        "/v1/bookings",
        json={"bulk": True, "ids": [str(first.id), str(second.id)], "deal_id": str(uuid.uuid4())},
        headers=admin_headers,
    )

    assert response.status_code == 400

    listed = (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"]
    assert all(b["deal_id"] is None for b in listed)
    assert await _activity(test_client, admin_headers) == []


@pytest.mark.asyncio
async def test_bulk_update_requires_admin(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer)

    response = await test_client.put(
        "/v1/bookings",
        json={"bulk": True, "ids": [str(booking.id)], "status": "cancelled"},
        headers=customer_headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_bulk_update_requires_ids(test_client, admin_headers):
    response = await test_client.put(
        "/v1/bookings", json={"bulk": True, "ids": [], "status": "confirmed"}, headers=admin_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_soft_delete_hides_booking_until_restored(test_client, make_booking, customer, admin, admin_headers):
    booking = await make_booking(customer)

    deleted = await test_client.request("DELETE", "/v1/bookings", json={"id": str(booking.id)}, headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}

    visible = (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"]
    assert visible == []

    archived = (await test_client.get(
        "/v1/bookings", params={"include_deleted": "true"}, headers=admin_headers
    )).json()["data"]
    assert len(archived) == 1
    assert archived[0]["is_deleted"] is True
    assert archived[0]["deleted_by"] == str(admin.id)
    assert archived[0]["deleted_at"] is not None

    restored = await test_client.put(
        "/v1/bookings", json={"id": str(booking.id), "restore": True}, headers=admin_headers
    )
    assert restored.status_code == 200
    data = restored.json()["data"]
    assert data["is_deleted"] is False
    assert data["deleted_at"] is None
    assert data["deleted_by"] is None

    actions = [entry["action"] for entry in await _activity(test_client, admin_headers)]
    assert sorted(actions) == ["delete", "restore"]


@pytest.mark.asyncio
async def test_bulk_soft_delete(test_client, make_booking, customer, admin_headers):
    first = await make_booking(customer)
    second = await make_booking(customer, name="Sara Malik")

    response = await test_client.request(
        "DELETE",
        "/v1/bookings",
        json={"bulk": True, "ids": [str(first.id), str(second.id)]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"] == []

    entry = (await _activity(test_client, admin_headers))[0]
    assert entry["action"] == "bulk_delete"
    assert len(entry["details"]["ids"]) == 2


@pytest.mark.asyncio
async def test_customer_cannot_delete(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer)

    response = await test_client.request(
        "DELETE", "/v1/bookings", json={"id": str(booking.id)}, headers=customer_headers
    )

    assert response.status_code == 403
    assert response.json()["required_role"] == "admin"


@pytest.mark.asyncio
async def test_delete_unknown_booking_returns_404(test_client, admin_headers):
    response = await test_client.request(
        "DELETE", "/v1/bookings", json={"id": str(uuid.uuid4())}, headers=admin_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_restore_requires_admin(test_client, make_booking, customer, customer_headers):
    booking = await make_booking(customer, is_deleted=True)

    response = await test_client.put(
        "/v1/bookings", json={"id": str(booking.id), "restore": True}, headers=customer_headers
    )

    assert response.status_code == 403
