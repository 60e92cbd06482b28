"""
Dashboard figures for the admin panel, computed from the booking projection.
"""

from collections import Counter
from datetime import date, timedelta

from riding_club.schemas.booking import BookingKind, BookingRecord, BookingStatus


def pending_queue(bookings: list[BookingRecord]) -> list[tuple[BookingRecord, int]]:
    """
    Pending requests an admin has to decide, one entry per request: group
    members are folded into their parent, with the group size alongside.
    """
    member_counts = Counter(b.parent_subscription_id for b in bookings if b.parent_subscription_id)
    queue = []
    for booking in bookings:
        if booking.status != BookingStatus.PENDING or booking.kind == BookingKind.GROUP_MEMBER:
            continue
        size = 1 + member_counts.get(booking.id, 0)
        queue.append((booking, size))
    queue.sort(key=lambda item: (item[0].date, item[0].start_time))
    return queue


def compute_stats(bookings: list[BookingRecord], today: date | None = None) -> dict:
    today = today or date.today()
    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=6)
    this_week = [b for b in bookings if week_start <= b.date <= week_end]

    by_status = Counter(b.status for b in bookings)
    by_arena = Counter(b.arena for b in bookings)
    hours = Counter(b.start_time.hour for b in bookings)

    return {
        "total": len(bookings),
        "approved": by_status[BookingStatus.APPROVED.value],
        "pending": by_status[BookingStatus.PENDING.value],
        "rejected": by_status[BookingStatus.REJECTED.value],
        "indoor": by_arena["indoor"],
        "outdoor": by_arena["outdoor"],
        "shared": sum(1 for b in bookings if b.shared_riding),
        "subscriptions": sum(1 for b in bookings if b.is_subscription),
        "total_capacity": sum(b.max_riders for b in bookings),
        "current_occupancy": sum(b.current_riders for b in bookings),
        "this_week_total": len(this_week),
        "this_week_approved": sum(1 for b in this_week if b.status == BookingStatus.APPROVED),
        "this_week_pending": sum(1 for b in this_week if b.status == BookingStatus.PENDING),
        "peak_hour": hours.most_common(1)[0][0] if hours else None,
    }
