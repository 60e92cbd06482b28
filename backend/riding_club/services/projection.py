"""
In-memory view of live bookings, owned by the application.

Only the submission service and the group coordinator write to it: they
apply their change optimistically, run the durable writes, then call
``refresh``. A failed refresh keeps the optimistic state instead of falling
back to an older snapshot.
"""

from typing import Optional

from riding_club.core.logging import get_logger
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.booking import BookingRecord, BookingStatus
from riding_club.services.approval import transition_fields

logger = get_logger(__name__)


class BookingProjection:
    def __init__(self):
        self._bookings: dict[str, BookingRecord] = {}
        self.last_refresh_ok: Optional[bool] = None

    def __len__(self) -> int:
        return len(self._bookings)

    def __contains__(self, booking_id: str) -> bool:
        return booking_id in self._bookings

    def get(self, booking_id: str) -> Optional[BookingRecord]:
        return self._bookings.get(booking_id)

    def all(self) -> list[BookingRecord]:
        return sorted(self._bookings.values(), key=lambda b: (b.created_at, b.id), reverse=True)

    def add(self, records: list[BookingRecord]) -> None:
        for record in records:
            self._bookings[record.id] = record

    def apply_status(
        self, booking_ids: list[str], status: BookingStatus, shared_riding: Optional[bool] = None
    ) -> None:
        values = transition_fields(status, shared_riding)
        for booking_id in booking_ids:
            record = self._bookings.get(booking_id)
            if record is not None:
                self._bookings[booking_id] = record.model_copy(update=values)

    def remove(self, booking_ids: list[str]) -> None:
        for booking_id in booking_ids:
            self._bookings.pop(booking_id, None)

    def replace(self, records: list[BookingRecord]) -> None:
        self._bookings = {r.id: r for r in records if not r.is_deleted}

    async def refresh(self, gateway: BookingGateway) -> bool:
        """Reload from the gateway. Returns False, keeping current state, on failure."""
        try:
            records = await gateway.list_bookings()
        except Exception as e:
            logger.warning("projection_refresh_failed", error=str(e), kept=len(self._bookings))
            self.last_refresh_ok = False
            return False
        self.replace(records)
        self.last_refresh_ok = True
        return True
