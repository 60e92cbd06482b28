"""
Approval workflow for a single booking.

    pending --approve--> approved
    pending --reject---> rejected

Re-applying approved/rejected is allowed and yields the same state. Moving
back to pending is not offered. Both gateway tiers build their update from
``transition_fields`` so the side effects are identical everywhere.
"""

from datetime import datetime
from typing import Optional

from riding_club.core.config import get_settings
from riding_club.core.errors import InvalidTransitionError
from riding_club.db.base import utcnow
from riding_club.schemas.booking import BookingStatus

TERMINAL_STATES = frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED})


def capacity_for(shared_riding: bool) -> int:
    return get_settings().SHARED_RIDING_CAPACITY if shared_riding else 1


def transition_fields(
    status: BookingStatus | str,
    shared_riding: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Column values for moving a booking to ``status``.

    ``shared_riding`` is only honoured on approval; ``current_riders`` is
    never part of a transition.
    """
    status = BookingStatus(status)
    if status not in TERMINAL_STATES:
        raise InvalidTransitionError(f"Cannot move a booking back to {status.value}")

    fields = {"status": status.value, "updated_at": now or utcnow()}
    if status == BookingStatus.APPROVED and shared_riding is not None:
        fields["shared_riding"] = shared_riding
        fields["max_riders"] = capacity_for(shared_riding)
    return fields
