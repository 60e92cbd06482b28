"""
Tests for submission validation rules.
"""

from datetime import date, time, timedelta

import pytest

from riding_club.core.errors import SubmissionValidationError
from riding_club.schemas.booking import Arena, BookingSubmission, BookingType
from riding_club.services.validation import collect_errors, duration_minutes, validate_submission


def submission(**overrides) -> BookingSubmission:
    values = {
        "arena": "indoor",
        "date": "2025-01-06",
        "start_time": "10:00",
        "end_time": "11:00",
    }
    values.update(overrides)
    return BookingSubmission(**values)


def test_one_hour_is_valid():
    assert collect_errors(submission()) == []


def test_valid_submission_is_parsed():
    valid = validate_submission(submission(purpose="Dressage"))
    assert valid.arena == Arena.INDOOR
    assert valid.date == date(2025, 1, 6)
    assert valid.start_time == time(10, 0)
    assert valid.end_time == time(11, 0)
    assert valid.booking_type == BookingType.MEMBER
    assert valid.purpose == "Dressage"
    assert valid.subscription_end_date is None


def test_fifteen_minutes_rejected():
    errors = collect_errors(submission(end_time="10:15"))
    assert errors == ["Bookings must last at least 30 minutes"]


def test_three_and_a_half_hours_rejected():
    errors = collect_errors(submission(end_time="13:30"))
    assert errors == ["Bookings may last at most 180 minutes"]


@pytest.mark.parametrize("end", ["10:30", "13:00"])
def test_duration_limits_are_inclusive(end):
    assert collect_errors(submission(end_time=end)) == []


def test_end_before_start_rejected():
    errors = collect_errors(submission(start_time="12:00", end_time="11:00"))
    assert "End time must be after start time" in errors


def test_every_missing_field_reported():
    errors = collect_errors(BookingSubmission())
    assert errors == [
        "Please choose an arena",
        "Please choose a date",
        "Please choose a start time",
        "Please choose an end time",
    ]


def test_malformed_values_reported_with_other_rules():
    errors = collect_errors(
        submission(arena="sandpit", end_time="10:15", is_subscription=True)
    )
    assert errors == [
        "Unknown arena 'sandpit'",
        "Bookings must last at least 30 minutes",
        "Please choose an end date for the subscription",
    ]


def test_unparseable_times_and_dates_reported():
    errors = collect_errors(
        submission(
            date="2025-13-01",
            start_time="25:00",
            is_subscription=True,
            subscription_end_date="someday",
        )
    )
    assert errors == [
        "'2025-13-01' is not a valid date",
        "'25:00' is not a valid start time",
        "'someday' is not a valid subscription end date",
    ]


def test_unknown_booking_type_rejected():
    assert collect_errors(submission(booking_type="party")) == ["Unknown booking type 'party'"]


def test_overlong_purpose_rejected():
    assert collect_errors(submission(purpose="x" * 501)) == ["Purpose may be at most 500 characters"]


def test_subscription_needs_end_date():
    errors = collect_errors(submission(is_subscription=True))
    assert errors == ["Please choose an end date for the subscription"]


def test_subscription_end_must_follow_start():
    errors = collect_errors(submission(is_subscription=True, subscription_end_date="2025-01-06"))
    assert errors == ["Subscription end date must be after the start date"]


def test_subscription_over_52_weeks_rejected():
    end = (date(2025, 1, 6) + timedelta(weeks=53)).isoformat()
    errors = collect_errors(submission(is_subscription=True, subscription_end_date=end))
    assert errors == ["A subscription may last at most 52 weeks"]


def test_end_date_ignored_for_single_bookings():
    assert collect_errors(submission(subscription_end_date="2024-01-01")) == []


def test_validate_raises_with_all_errors():
    with pytest.raises(SubmissionValidationError) as exc_info:
        validate_submission(submission(arena=None, end_time="10:15"))
    assert exc_info.value.errors == [
        "Please choose an arena",
        "Bookings must last at least 30 minutes",
    ]


def test_duration_minutes():
    assert duration_minutes(time(9, 45), time(11, 0)) == 75
