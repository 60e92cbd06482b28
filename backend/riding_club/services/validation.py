"""
Submission validation. Every field is parsed and every rule runs; all
messages are returned together.
"""

import datetime as dt
import math
from datetime import datetime
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from riding_club.core.config import get_settings
from riding_club.core.errors import SubmissionValidationError
from riding_club.schemas.booking import Arena, BookingSubmission, BookingType, ValidSubmission

PURPOSE_MAX_LENGTH = 500
TEMPLATE_TYPE_MAX_LENGTH = 64

_date = TypeAdapter(dt.date)
_time = TypeAdapter(dt.time)


def duration_minutes(start, end) -> int:
    day = datetime.min.date()
    delta = datetime.combine(day, end) - datetime.combine(day, start)
    return int(delta.total_seconds() // 60)


def span_weeks(start_date, end_date) -> int:
    """Weeks covered by a subscription range, rounded up."""
    return math.ceil(abs((end_date - start_date).days) / 7)


def _parse(adapter: TypeAdapter, raw: Optional[str]) -> Any:
    """Parsed value, or None when ``raw`` does not parse."""
    try:
        return adapter.validate_python(raw)
    except ValidationError:
        return None


def _check(submission: BookingSubmission) -> tuple[list[str], dict]:
    """Run every rule. Returns the messages and whatever values parsed."""
    settings = get_settings()
    errors: list[str] = []
    values: dict = {}

    if submission.arena is None:
        errors.append("Please choose an arena")
    elif submission.arena not in {a.value for a in Arena}:
        errors.append(f"Unknown arena '{submission.arena}'")
    else:
        values["arena"] = submission.arena

    for field, label, adapter in (
        ("date", "date", _date),
        ("start_time", "start time", _time),
        ("end_time", "end time", _time),
    ):
        raw = getattr(submission, field)
        if raw is None:
            errors.append(f"Please choose a {label}")
            continue
        parsed = _parse(adapter, raw)
        if parsed is None:
            errors.append(f"'{raw}' is not a valid {label}")
        else:
            values[field] = parsed

    start, end = values.get("start_time"), values.get("end_time")
    if start is not None and end is not None:
        minutes = duration_minutes(start, end)
        if minutes <= 0:
            errors.append("End time must be after start time")
        if minutes < settings.MIN_BOOKING_MINUTES:
            errors.append(f"Bookings must last at least {settings.MIN_BOOKING_MINUTES} minutes")
        if minutes > settings.MAX_BOOKING_MINUTES:
            errors.append(f"Bookings may last at most {settings.MAX_BOOKING_MINUTES} minutes")

    if len(submission.purpose) > PURPOSE_MAX_LENGTH:
        errors.append(f"Purpose may be at most {PURPOSE_MAX_LENGTH} characters")
    if submission.template_type and len(submission.template_type) > TEMPLATE_TYPE_MAX_LENGTH:
        errors.append(f"Template type may be at most {TEMPLATE_TYPE_MAX_LENGTH} characters")

    if submission.booking_type is not None:
        if submission.booking_type in {t.value for t in BookingType}:
            values["booking_type"] = submission.booking_type
        else:
            errors.append(f"Unknown booking type '{submission.booking_type}'")

    if submission.is_subscription:
        raw_end = submission.subscription_end_date
        end_date = _parse(_date, raw_end) if raw_end is not None else None
        start_date = values.get("date")
        if raw_end is None:
            errors.append("Please choose an end date for the subscription")
        elif end_date is None:
            errors.append(f"'{raw_end}' is not a valid subscription end date")
        else:
            values["subscription_end_date"] = end_date
            if start_date is not None:
                if end_date <= start_date:
                    errors.append("Subscription end date must be after the start date")
                if span_weeks(start_date, end_date) > settings.MAX_SUBSCRIPTION_WEEKS:
                    errors.append(
                        f"A subscription may last at most {settings.MAX_SUBSCRIPTION_WEEKS} weeks"
                    )

    return errors, values


def collect_errors(submission: BookingSubmission) -> list[str]:
    return _check(submission)[0]


def validate_submission(submission: BookingSubmission) -> ValidSubmission:
    errors, values = _check(submission)
    if errors:
        raise SubmissionValidationError(errors)
    return ValidSubmission(
        **values,
        purpose=submission.purpose,
        template_type=submission.template_type,
        is_subscription=submission.is_subscription,
        rake_required=submission.rake_required,
        shared_riding=submission.shared_riding,
    )
