"""
Group lifecycle coordinator.

FAN-OUT STRATEGY: best effort, member by member
================================================

A subscription is stored as one parent row (is_subscription, no parent id)
plus one row per later week pointing at it. There is no stored member list,
so the group is always whatever rows currently reference the parent.

approve_group / reject_group / delete_group on a parent id:
  1. Resolve the member set: the parent plus its live members
  2. Apply the change to the projection optimistically
  3. Write every member independently; a failure is recorded and the
     loop moves on. Nothing already written is rolled back
  4. Refresh the projection from the gateway (best effort)

The same operations on a group member or a standalone booking touch only
that booking. delete_single never cascades, whatever the id.
"""

from typing import Awaitable, Callable, Optional

from riding_club.core.errors import BookingNotFoundError
from riding_club.core.logging import get_logger
from riding_club.core.metrics import record_fanout
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.booking import BookingKind, BookingRecord, BookingStatus
from riding_club.services.projection import BookingProjection
from riding_club.services.results import FanOutResult

logger = get_logger(__name__)


class GroupLifecycleCoordinator:
    def __init__(self, gateway: BookingGateway, projection: BookingProjection):
        self.gateway = gateway
        self.projection = projection

    async def get_live(self, booking_id: str) -> BookingRecord:
        booking = await self.gateway.get_booking(booking_id)
        if booking is None or booking.is_deleted:
            logger.info("booking_not_found", booking_id=booking_id)
            raise BookingNotFoundError(booking_id)
        return booking

    async def resolve_members(self, booking_id: str) -> list[BookingRecord]:
        """The bookings a group operation on ``booking_id`` applies to, parent first."""
        booking = await self.get_live(booking_id)
        if booking.kind != BookingKind.GROUP_PARENT:
            return [booking]
        members = await self.gateway.list_group_members(booking.id)
        return [booking, *members]

    async def approve_group(self, booking_id: str, shared_riding: Optional[bool] = False) -> FanOutResult:
        members = await self.resolve_members(booking_id)
        ids = [m.id for m in members]
        self.projection.apply_status(ids, BookingStatus.APPROVED, shared_riding)

        async def approve(member_id: str) -> bool:
            return await self.gateway.update_booking_status(
                member_id, BookingStatus.APPROVED, shared_riding
            )

        return await self._fan_out("approve", booking_id, ids, approve)

    async def reject_group(self, booking_id: str) -> FanOutResult:
        members = await self.resolve_members(booking_id)
        ids = [m.id for m in members]
        self.projection.apply_status(ids, BookingStatus.REJECTED)

        async def reject(member_id: str) -> bool:
            return await self.gateway.update_booking_status(member_id, BookingStatus.REJECTED)

        return await self._fan_out("reject", booking_id, ids, reject)

    async def delete_group(self, booking_id: str) -> FanOutResult:
        members = await self.resolve_members(booking_id)
        ids = [m.id for m in members]
        self.projection.remove(ids)
        return await self._fan_out("delete", booking_id, ids, self.gateway.soft_delete_booking)

    async def delete_single(self, booking_id: str) -> FanOutResult:
        booking = await self.get_live(booking_id)
        self.projection.remove([booking.id])
        return await self._fan_out(
            "delete_single", booking_id, [booking.id], self.gateway.soft_delete_booking
        )

    async def _fan_out(
        self,
        operation: str,
        target_id: str,
        member_ids: list[str],
        apply: Callable[[str], Awaitable[bool]],
    ) -> FanOutResult:
        result = FanOutResult(operation=operation, target_id=target_id)

        for member_id in member_ids:
            try:
                ok = await apply(member_id)
            except Exception as e:
                logger.error("group_member_failed", operation=operation, booking_id=member_id, error=str(e))
                ok = False
            (result.succeeded if ok else result.failed).append(member_id)

        record_fanout(operation, result.outcome, result.total)
        log = logger.info if result.outcome == "complete" else logger.warning
        log(
            f"group_fanout_{result.outcome}",
            operation=operation,
            target_id=target_id,
            succeeded=len(result.succeeded),
            failed=len(result.failed),
        )

        await self.projection.refresh(self.gateway)
        return result
