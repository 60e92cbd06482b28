"""
Weekly recurrence expansion.

A subscription from ``start_date`` to ``end_date`` becomes one booking per
7-day step, the last one on or before ``end_date``. The first instance is
the group parent and carries the end date; every later instance points at
it through ``parent_subscription_id``.
"""

import uuid
from datetime import date, timedelta
from typing import Callable, Optional

from riding_club.core.config import get_settings
from riding_club.core.errors import RecurrenceError
from riding_club.schemas.booking import BookingDraft, BookingTemplate
from riding_club.services.validation import span_weeks

WEEK = timedelta(days=7)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def weekly_dates(start_date: date, end_date: date) -> list[date]:
    if end_date <= start_date:
        raise RecurrenceError(
            f"Subscription end {end_date.isoformat()} must be after start {start_date.isoformat()}"
        )
    max_weeks = get_settings().MAX_SUBSCRIPTION_WEEKS
    if span_weeks(start_date, end_date) > max_weeks:
        raise RecurrenceError(f"Subscription longer than {max_weeks} weeks")

    dates = []
    current = start_date
    while current <= end_date:
        dates.append(current)
        current += WEEK
    return dates


def expand_weekly(
    start_date: date,
    end_date: date,
    template: BookingTemplate,
    group_id: Optional[str] = None,
    id_factory: Callable[[str, int], str] | None = None,
) -> list[BookingDraft]:
    """
    Build every instance of a weekly subscription, parent first.

    ``id_factory(group_id, week)`` names the non-parent instances; the
    default derives ``<group_id>_week_<n>``.
    """
    dates = weekly_dates(start_date, end_date)
    group_id = group_id or new_id("subscription")
    id_factory = id_factory or (lambda parent, week: f"{parent}_week_{week}")
    fields = template.model_dump()

    drafts = [
        BookingDraft(
            **fields,
            id=group_id,
            date=dates[0],
            is_subscription=True,
            subscription_end_date=end_date,
        )
    ]
    for week, day in enumerate(dates[1:], start=1):
        drafts.append(
            BookingDraft(
                **fields,
                id=id_factory(group_id, week),
                date=day,
                parent_subscription_id=group_id,
            )
        )
    return drafts
