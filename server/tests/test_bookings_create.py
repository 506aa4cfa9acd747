"""Booking funnel: validation, pricing, idempotency and notifications."""

import uuid

import pytest

from conftest import make_token


@pytest.mark.asyncio
async def test_create_booking_prices_with_discount(test_client, booking_payload, notifications):
    response = await test_client.post("/v1/bookings", json=booking_payload)

    assert response.status_code == 200
    booking = response.json()["booking"]
    assert set(booking) == {"id", "created_at", "total_price"}
    # 3 travelers at the 12,000 sale price
    assert booking["total_price"] == 36000

    assert len(notifications.sent) == 1
    details = notifications.sent[0]
    assert details.booking_id == booking["id"]
    assert details.tour_title == "Hunza Valley Explorer"
    assert details.customer_email == "ayesha@example.com"


@pytest.mark.asyncio
async def test_create_booking_uses_list_price_without_discount(test_client, test_session, tour, booking_payload):
    tour.discount_price = None
    test_session.add(tour)
    await test_session.commit()

    response = await test_client.post("/v1/bookings", json={**booking_payload, "num_travelers": 2})

    assert response.status_code == 200
    assert response.json()["booking"]["total_price"] == 30000


@pytest.mark.asyncio
async def test_create_booking_ignores_client_price(test_client, booking_payload):
    response = await test_client.post("/v1/bookings", json={**booking_payload, "total_price": 1})

    assert response.status_code == 200
    assert response.json()["booking"]["total_price"] == 36000


@pytest.mark.asyncio
async def test_create_booking_without_tour_is_unpriced(test_client, booking_payload, notifications):
    payload = {**booking_payload, "tour_id": ""}

    response = await test_client.post("/v1/bookings", json=payload)

    assert response.status_code == 200
    assert response.json()["booking"]["total_price"] is None
    assert notifications.sent[0].tour_title is None


@pytest.mark.asyncio
async def test_create_booking_unknown_tour_returns_404(test_client, booking_payload, notifications):
    response = await test_client.post(
        "/v1/bookings", json={**booking_payload, "tour_id": str(uuid.uuid4())}
    )

    assert response.status_code == 404
    assert response.json()["resource_type"] == "tour"
    assert notifications.sent == []


@pytest.mark.asyncio
async def test_empty_body_reports_name_first(test_client, tour):
    response = await test_client.post("/v1/bookings", json={})

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Name is required"
    paths = [violation["path"] for violation in data["violations"]]
    assert paths[:5] == ["customer_name", "customer_email", "customer_phone", "travel_date", "num_travelers"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"customer_name": " A "}, "Name is required"),
        ({"customer_email": "not-an-email"}, "Valid email is required"),
        ({"customer_email": "a@b"}, "Valid email is required"),
        ({"customer_phone": "12345"}, "Valid phone is required"),
        ({"travel_date": ""}, "Travel date is required"),
        ({"num_travelers": 0}, "Number of travelers must be between 1 and 50"),
        ({"num_travelers": 51}, "Number of travelers must be between 1 and 50"),
        ({"num_travelers": "many"}, "Number of travelers must be between 1 and 50"),
        ({"num_travelers": 2.5}, "Number of travelers must be between 1 and 50"),
        ({"num_travelers": True}, "Number of travelers must be between 1 and 50"),
    ],
)
async def test_create_booking_validation_messages(test_client, booking_payload, overrides, message):
    response = await test_client.post("/v1/bookings", json={**booking_payload, **overrides})

    assert response.status_code == 400
    assert response.json()["detail"] == message


@pytest.mark.asyncio
async def test_first_failing_rule_wins(test_client, booking_payload):
    payload = {**booking_payload, "customer_phone": "1", "num_travelers": 99}

    response = await test_client.post("/v1/bookings", json=payload)

    assert response.json()["detail"] == "Valid phone is required"


@pytest.mark.asyncio
async def test_numeric_string_travelers_accepted(test_client, booking_payload):
    response = await test_client.post("/v1/bookings", json={**booking_payload, "num_travelers": "4"})

    assert response.status_code == 200
    assert response.json()["booking"]["total_price"] == 48000


@pytest.mark.asyncio
async def test_signed_in_booking_is_linked_to_customer(test_client, booking_payload, customer_headers):
    created = await test_client.post("/v1/bookings", json=booking_payload, headers=customer_headers)
    assert created.status_code == 200

    mine = await test_client.get("/v1/bookings", headers=customer_headers)
    bookings = mine.json()["data"]
    assert [b["id"] for b in bookings] == [created.json()["booking"]["id"]]
    assert bookings[0]["status"] == "pending"
    assert bookings[0]["tour"]["title"] == "Hunza Valley Explorer"


@pytest.mark.asyncio
async def test_invalid_token_books_anonymously(test_client, booking_payload, admin_headers, customer):
    headers = {"Authorization": f"Bearer {make_token(customer.id, secret='wrong-secret')}"}

    response = await test_client.post("/v1/bookings", json=booking_payload, headers=headers)
    assert response.status_code == 200

    listed = (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"]
    assert listed[0]["user_id"] is None
    assert listed[0]["customer_email"] == "ayesha@example.com"
    assert listed[0]["special_requests"] == "Window seats please"


@pytest.mark.asyncio
async def test_idempotent_retry_replays_first_response(test_client, booking_payload, notifications, admin_headers):
    headers = {"Idempotency-Key": "funnel-retry-1"}

    first = await test_client.post("/v1/bookings", json=booking_payload, headers=headers)
    second = await test_client.post("/v1/bookings", json=booking_payload, headers=headers)

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert second.headers["Idempotent-Replayed"] == "true"
    assert "Idempotent-Replayed" not in first.headers
    assert len(notifications.sent) == 1

    listed = (await test_client.get("/v1/bookings", headers=admin_headers)).json()["data"]
    assert len(listed) == 1


@pytest.mark.asyncio
async def test_idempotency_key_reused_with_different_body(test_client, booking_payload):
    headers = {"Idempotency-Key": "funnel-retry-2"}

    await test_client.post("/v1/bookings", json=booking_payload, headers=headers)
    response = await test_client.post(
        "/v1/bookings", json={**booking_payload, "num_travelers": 5}, headers=headers
    )

    assert response.status_code == 422
    assert response.json()["code"] == "IDEMPOTENCY_KEY_MISMATCH"


@pytest.mark.asyncio
async def test_oversized_idempotency_key_rejected(test_client, booking_payload):
    response = await test_client.post(
        "/v1/bookings", json=booking_payload, headers={"Idempotency-Key": "k" * 256}
    )

    assert response.status_code == 400
