"""
Tests for member booking endpoints: submission, listing, calendar, deletion.
"""

import pytest
from httpx import AsyncClient

from conftest import make_token

SINGLE = {"arena": "indoor", "date": "2025-03-03", "start_time": "10:00", "end_time": "11:00"}
WEEKLY = {
    "arena": "outdoor",
    "date": "2025-01-06",
    "start_time": "17:00",
    "end_time": "18:00",
    "is_subscription": True,
    "subscription_end_date": "2025-02-03",
}


async def submit(client: AsyncClient, headers: dict, body: dict) -> dict:
    response = await client.post("/api/v1/bookings/", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_submit_single_booking(client: AsyncClient, member_headers):
    """A member's booking starts pending, single rider, member type."""
    data = await submit(client, member_headers, {**SINGLE, "purpose": "Jumping practice"})

    assert data["outcome"] == "complete"
    assert data["group_id"] is None
    assert data["failed_ids"] == []
    [booking] = data["created"]
    assert booking["kind"] == "single"
    assert booking["status"] == "pending"
    assert booking["owner_id"] == "member-1"
    assert booking["owner_display_name"] == "Anna"
    assert booking["booking_type"] == "member"
    assert booking["max_riders"] == 1
    assert booking["current_riders"] == 1
    assert booking["start_time"] == "10:00:00"


@pytest.mark.asyncio
async def test_submit_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/bookings/", json=SINGLE)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_submit_with_bad_token(client: AsyncClient):
    forged = make_token("member-1", "Anna").replace(".", ".x", 1)
    response = await client.post(
        "/api/v1/bookings/", json=SINGLE, headers={"Authorization": f"Bearer {forged}"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_display_name_falls_back_to_email(client: AsyncClient):
    token = make_token("member-9", "", email="carla@stable.example")
    data = await submit(client, {"Authorization": f"Bearer {token}"}, SINGLE)
    assert data["created"][0]["owner_display_name"] == "carla"


@pytest.mark.asyncio
async def test_too_short_booking_rejected(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/bookings/", json={**SINGLE, "end_time": "10:15"}, headers=member_headers
    )
    assert response.status_code == 422
    assert response.json()["errors"] == ["Bookings must last at least 30 minutes"]


@pytest.mark.asyncio
async def test_too_long_booking_rejected(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/bookings/", json={**SINGLE, "end_time": "13:30"}, headers=member_headers
    )
    assert response.status_code == 422
    assert response.json()["errors"] == ["Bookings may last at most 180 minutes"]


@pytest.mark.asyncio
async def test_missing_fields_all_reported(client: AsyncClient, member_headers):
    response = await client.post("/api/v1/bookings/", json={}, headers=member_headers)
    assert response.status_code == 422
    assert len(response.json()["errors"]) == 4


@pytest.mark.asyncio
async def test_malformed_values_reported_with_every_other_problem(client: AsyncClient, member_headers):
    body = {
        "arena": "sandpit",
        "date": "2025-01-06",
        "start_time": "10:00",
        "end_time": "10:15",
        "is_subscription": True,
    }
    response = await client.post("/api/v1/bookings/", json=body, headers=member_headers)

    assert response.status_code == 422
    assert response.json()["errors"] == [
        "Unknown arena 'sandpit'",
        "Bookings must last at least 30 minutes",
        "Please choose an end date for the subscription",
    ]


@pytest.mark.asyncio
async def test_unparseable_time_reported(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/bookings/", json={**SINGLE, "start_time": "25:00"}, headers=member_headers
    )
    assert response.status_code == 422
    assert response.json()["errors"] == ["'25:00' is not a valid start time"]


@pytest.mark.asyncio
async def test_wrongly_typed_body_keeps_error_list_shape(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/bookings/", json={**SINGLE, "is_subscription": "maybe"}, headers=member_headers
    )
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Request is invalid"
    assert len(data["errors"]) == 1
    assert data["errors"][0].startswith("is_subscription: ")


@pytest.mark.asyncio
async def test_submit_weekly_subscription(client: AsyncClient, member_headers):
    data = await submit(client, member_headers, WEEKLY)

    created = data["created"]
    assert len(created) == 5
    parent = created[0]
    assert data["group_id"] == parent["id"]
    assert parent["kind"] == "group-parent"
    assert parent["subscription_end_date"] == "2025-02-03"
    assert [b["date"] for b in created] == [
        "2025-01-06", "2025-01-13", "2025-01-20", "2025-01-27", "2025-02-03"
    ]
    for member in created[1:]:
        assert member["kind"] == "group-member"
        assert member["parent_subscription_id"] == parent["id"]


@pytest.mark.asyncio
async def test_subscription_longer_than_a_year_rejected(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/bookings/",
        json={**WEEKLY, "subscription_end_date": "2026-01-12"},
        headers=member_headers,
    )
    assert response.status_code == 422
    assert response.json()["errors"] == ["A subscription may last at most 52 weeks"]


@pytest.mark.asyncio
async def test_admin_booking_approved_with_options(client: AsyncClient, admin_headers):
    data = await submit(
        client,
        admin_headers,
        {**SINGLE, "booking_type": "lesson", "shared_riding": True, "rake_required": True},
    )
    [booking] = data["created"]
    assert booking["status"] == "approved"
    assert booking["booking_type"] == "lesson"
    assert booking["shared_riding"] is True
    assert booking["max_riders"] == 6
    assert booking["rake_required"] is True


@pytest.mark.asyncio
async def test_partial_submission_returns_207(app, client: AsyncClient, member_headers, monkeypatch):
    gateway = app.state.gateway
    original = gateway.create_booking
    calls = []

    async def create_booking(draft):
        calls.append(draft.id)
        if len(calls) == 3:
            raise RuntimeError("disk full")
        return await original(draft)

    monkeypatch.setattr(gateway, "create_booking", create_booking)

    response = await client.post("/api/v1/bookings/", json=WEEKLY, headers=member_headers)

    assert response.status_code == 207
    data = response.json()
    assert len(calls) == 5
    assert data["outcome"] == "partial"
    assert data["failed"] == [calls[2]]
    assert data["succeeded"] == [calls[0], calls[1], calls[3], calls[4]]
    assert len(data["created"]) == 4


@pytest.mark.asyncio
async def test_list_own_bookings(client: AsyncClient, member_headers, other_member_headers):
    await submit(client, member_headers, SINGLE)
    await submit(client, other_member_headers, {**SINGLE, "arena": "outdoor"})

    response = await client.get("/api/v1/bookings/", headers=member_headers)

    assert response.status_code == 200
    bookings = response.json()
    assert len(bookings) == 1
    assert bookings[0]["owner_id"] == "member-1"


@pytest.mark.asyncio
async def test_calendar_shows_only_approved(client: AsyncClient, member_headers, admin_headers):
    await submit(client, member_headers, SINGLE)
    await submit(client, admin_headers, {**SINGLE, "start_time": "12:00", "end_time": "13:00"})
    await submit(client, admin_headers, {**SINGLE, "date": "2025-04-01"})

    response = await client.get(
        "/api/v1/bookings/calendar",
        params={"start": "2025-03-01", "end": "2025-03-31"},
        headers=member_headers,
    )

    assert response.status_code == 200
    bookings = response.json()
    assert len(bookings) == 1
    assert bookings[0]["start_time"] == "12:00:00"


@pytest.mark.asyncio
async def test_deleted_booking_leaves_calendar(client: AsyncClient, member_headers, admin_headers):
    data = await submit(client, admin_headers, SINGLE)
    booking_id = data["created"][0]["id"]

    before = await client.get("/api/v1/bookings/calendar", headers=member_headers)
    assert [b["id"] for b in before.json()] == [booking_id]

    response = await client.delete(f"/api/v1/bookings/{booking_id}", headers=admin_headers)
    assert response.status_code == 200

    after = await client.get("/api/v1/bookings/calendar", headers=member_headers)
    assert after.status_code == 200
    assert after.json() == []


@pytest.mark.asyncio
async def test_delete_subscription_from_parent(client: AsyncClient, member_headers):
    data = await submit(client, member_headers, WEEKLY)
    group_id = data["group_id"]

    response = await client.delete(f"/api/v1/bookings/{group_id}", headers=member_headers)

    assert response.status_code == 200
    assert response.json()["outcome"] == "complete"
    assert response.json()["total"] == 5
    listing = await client.get("/api/v1/bookings/", headers=member_headers)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_delete_occurrence_of_parent_keeps_members(client: AsyncClient, member_headers):
    data = await submit(client, member_headers, WEEKLY)
    group_id = data["group_id"]

    response = await client.delete(f"/api/v1/bookings/{group_id}/occurrence", headers=member_headers)

    assert response.status_code == 200
    assert response.json()["succeeded"] == [group_id]
    listing = await client.get("/api/v1/bookings/", headers=member_headers)
    assert len(listing.json()) == 4


@pytest.mark.asyncio
async def test_delete_member_week_only(client: AsyncClient, member_headers):
    data = await submit(client, member_headers, WEEKLY)
    member_id = data["created"][2]["id"]

    response = await client.delete(f"/api/v1/bookings/{member_id}", headers=member_headers)

    assert response.json()["succeeded"] == [member_id]
    listing = await client.get("/api/v1/bookings/", headers=member_headers)
    assert member_id not in {b["id"] for b in listing.json()}
    assert len(listing.json()) == 4


@pytest.mark.asyncio
async def test_delete_someone_elses_booking_forbidden(
    client: AsyncClient, member_headers, other_member_headers
):
    data = await submit(client, member_headers, SINGLE)
    booking_id = data["created"][0]["id"]

    response = await client.delete(f"/api/v1/bookings/{booking_id}", headers=other_member_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_delete_any_booking(client: AsyncClient, member_headers, admin_headers):
    data = await submit(client, member_headers, SINGLE)
    booking_id = data["created"][0]["id"]

    response = await client.delete(f"/api/v1/bookings/{booking_id}", headers=admin_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_twice_is_not_found(client: AsyncClient, member_headers):
    data = await submit(client, member_headers, SINGLE)
    booking_id = data["created"][0]["id"]

    first = await client.delete(f"/api/v1/bookings/{booking_id}", headers=member_headers)
    second = await client.delete(f"/api/v1/bookings/{booking_id}", headers=member_headers)

    assert first.status_code == 200
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_booking(client: AsyncClient, member_headers):
    response = await client.delete("/api/v1/bookings/booking_missing", headers=member_headers)
    assert response.status_code == 404
