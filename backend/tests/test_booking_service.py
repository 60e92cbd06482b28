"""
Tests for booking submission: templates, expansion and partial writes.
"""

from datetime import date

import pytest

from riding_club.core.errors import SubmissionValidationError
from riding_club.core.security import Requester
from riding_club.schemas.booking import BookingKind, BookingSubmission
from riding_club.services.booking_service import list_calendar, submit_booking
from riding_club.services.recurrence import expand_weekly
from conftest import SUBSCRIPTION_END, SUBSCRIPTION_START, make_template

MEMBER = Requester(user_id="member-1", display_name="Anna")
ADMIN = Requester(user_id="admin-1", display_name="Office", is_admin=True)


def weekly(**overrides) -> BookingSubmission:
    values = {
        "arena": "outdoor",
        "date": SUBSCRIPTION_START.isoformat(),
        "start_time": "17:00",
        "end_time": "18:00",
        "is_subscription": True,
        "subscription_end_date": SUBSCRIPTION_END.isoformat(),
    }
    values.update(overrides)
    return BookingSubmission(**values)


@pytest.mark.asyncio
async def test_member_single_booking_is_pending(store, projection):
    result = await submit_booking(
        store, projection, weekly(is_subscription=False, subscription_end_date=None), MEMBER
    )

    assert result.outcome == "complete"
    assert result.group_id is None
    [booking] = result.created
    assert booking.kind == BookingKind.SINGLE
    assert booking.status == "pending"
    assert booking.owner_id == "member-1"
    assert booking.owner_display_name == "Anna"
    assert booking.max_riders == 1
    assert booking.id in projection


@pytest.mark.asyncio
async def test_member_cannot_choose_type_or_sharing(store, projection):
    result = await submit_booking(
        store,
        projection,
        weekly(is_subscription=False, booking_type="lesson", shared_riding=True, rake_required=True),
        MEMBER,
    )
    [booking] = result.created
    assert booking.booking_type == "member"
    assert booking.shared_riding is False
    assert booking.rake_required is False


@pytest.mark.asyncio
async def test_admin_booking_is_approved_with_chosen_options(store, projection):
    result = await submit_booking(
        store,
        projection,
        weekly(is_subscription=False, booking_type="maintenance", shared_riding=True, rake_required=True),
        ADMIN,
    )
    [booking] = result.created
    assert booking.status == "approved"
    assert booking.booking_type == "maintenance"
    assert booking.rake_required is True
    assert booking.max_riders == 6


@pytest.mark.asyncio
async def test_subscription_creates_every_week(store, projection):
    result = await submit_booking(store, projection, weekly(), MEMBER)

    assert result.outcome == "complete"
    assert len(result.created) == 5
    parent = result.created[0]
    assert result.group_id == parent.id
    assert parent.kind == BookingKind.GROUP_PARENT
    assert {b.parent_subscription_id for b in result.created[1:]} == {parent.id}
    assert len(projection) == 5


@pytest.mark.asyncio
async def test_failure_on_third_instance_still_attempts_the_rest(store, projection):
    store.failing_creates = {3}

    result = await submit_booking(store, projection, weekly(), MEMBER)

    assert store.create_calls == 5
    assert result.outcome == "partial"
    assert len(result.succeeded) == 4
    assert len(result.failed) == 1
    assert result.failed[0].endswith("_week_2")
    assert [b.date for b in result.created] == [
        date(2025, 1, 6), date(2025, 1, 13), date(2025, 1, 27), date(2025, 2, 3)
    ]
    assert {b.id for b in await store.list_bookings()} == set(result.succeeded)


@pytest.mark.asyncio
async def test_invalid_submission_writes_nothing(store, projection):
    with pytest.raises(SubmissionValidationError):
        await submit_booking(store, projection, weekly(end_time="17:15"), MEMBER)
    assert store.create_calls == 0
    assert len(projection) == 0


@pytest.mark.asyncio
async def test_calendar_lists_approved_in_range(store):
    template = make_template(status="approved")
    for draft in expand_weekly(SUBSCRIPTION_START, SUBSCRIPTION_END, template, group_id="approved"):
        await store.create_booking(draft)
    for draft in expand_weekly(SUBSCRIPTION_START, SUBSCRIPTION_END, make_template(), group_id="pending"):
        await store.create_booking(draft)

    bookings = await list_calendar(store, date(2025, 1, 10), date(2025, 1, 31))

    assert [b.id for b in bookings] == ["approved_week_1", "approved_week_2", "approved_week_3"]
