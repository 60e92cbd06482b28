"""
Two-tier persistence gateway.

TIER POLICY
===========

  REMOTE    every call goes to the remote store, bounded by
            REMOTE_TIMEOUT_SECONDS. Results are copied into the local store.
  DEMOTED   a remote call timed out or lost its connection. Calls are
            served by the local store for FALLBACK_RETRY_SECONDS.
  (retry)   after the retry interval the next call tries the remote store
            again; success promotes the gateway back to REMOTE, failure
            restarts the interval.

Callers see the same contract in both states. Writes made while demoted stay
in the local store; they are not replayed against the remote store.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Optional

from riding_club.core.config import get_settings
from riding_club.core.errors import BackendUnavailable
from riding_club.core.logging import get_logger
from riding_club.core.metrics import gateway_demoted, gateway_fallbacks, record_gateway_call, remote_latency
from riding_club.gateway.base import BookingGateway
from riding_club.gateway.local import LocalStore
from riding_club.schemas.booking import BookingDraft, BookingRecord, BookingStatus
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord
from riding_club.schemas.profile import UserProfileRecord

logger = get_logger(__name__)


@dataclass
class TierPolicy:
    retry_after: float
    demoted_at: Optional[float] = None

    @property
    def demoted(self) -> bool:
        return self.demoted_at is not None

    def use_remote(self, now: float) -> bool:
        return self.demoted_at is None or now - self.demoted_at >= self.retry_after

    def demote(self, now: float) -> None:
        self.demoted_at = now
        gateway_demoted.set(1)

    def promote(self) -> None:
        self.demoted_at = None
        gateway_demoted.set(0)


class TieredGateway(BookingGateway):
    def __init__(
        self,
        remote: BookingGateway,
        local: LocalStore,
        timeout: float | None = None,
        retry_after: float | None = None,
        clock=time.monotonic,
    ):
        settings = get_settings()
        self.remote = remote
        self.local = local
        self.timeout = settings.REMOTE_TIMEOUT_SECONDS if timeout is None else timeout
        self.policy = TierPolicy(
            retry_after=settings.FALLBACK_RETRY_SECONDS if retry_after is None else retry_after
        )
        self._clock = clock

    @property
    def tier(self) -> str:
        return "local" if self.policy.demoted else "remote"

    def demote(self) -> None:
        self.policy.demote(self._clock())

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> tuple[str, Any]:
        """Run ``method`` on the tier the policy selects. Returns (tier, result)."""
        now = self._clock()
        if self.policy.use_remote(now):
            start = time.perf_counter()
            try:
                result = await asyncio.wait_for(
                    getattr(self.remote, method)(*args, **kwargs), timeout=self.timeout
                )
            except (BackendUnavailable, asyncio.TimeoutError) as e:
                gateway_fallbacks.inc()
                if not self.policy.demoted:
                    logger.warning("gateway_demoted", method=method, error=str(e) or type(e).__name__)
                self.policy.demote(self._clock())
            else:
                remote_latency.observe(time.perf_counter() - start)
                if self.policy.demoted:
                    logger.info("gateway_promoted", method=method)
                    self.policy.promote()
                record_gateway_call("remote")
                return "remote", result

        record_gateway_call("local")
        return "local", await getattr(self.local, method)(*args, **kwargs)

    async def ping(self) -> bool:
        """Check the remote store now, regardless of the retry interval."""
        try:
            await asyncio.wait_for(self.remote.ping(), timeout=self.timeout)
        except (BackendUnavailable, asyncio.TimeoutError):
            return False
        if self.policy.demoted:
            logger.info("gateway_promoted", method="ping")
            self.policy.promote()
        return True

    # Bookings

    async def create_booking(self, draft: BookingDraft) -> BookingRecord:
        tier, record = await self._call("create_booking", draft)
        if tier == "remote":
            self.local.remember_booking(record)
        return record

    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        tier, record = await self._call("get_booking", booking_id)
        if tier == "remote" and record is not None:
            self.local.remember_booking(record)
        return record

    async def list_bookings(
        self, owner_id: Optional[str] = None, include_deleted: bool = False
    ) -> list[BookingRecord]:
        tier, records = await self._call(
            "list_bookings", owner_id=owner_id, include_deleted=include_deleted
        )
        if tier == "remote":
            for record in records:
                self.local.remember_booking(record)
        return records

    async def list_group_members(self, parent_id: str) -> list[BookingRecord]:
        tier, records = await self._call("list_group_members", parent_id)
        if tier == "remote":
            for record in records:
                self.local.remember_booking(record)
        return records

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, shared_riding: Optional[bool] = None
    ) -> bool:
        tier, ok = await self._call("update_booking_status", booking_id, status, shared_riding)
        if tier == "remote" and ok:
            await self.local.update_booking_status(booking_id, status, shared_riding)
        return ok

    async def soft_delete_booking(self, booking_id: str) -> bool:
        tier, ok = await self._call("soft_delete_booking", booking_id)
        if tier == "remote" and ok:
            await self.local.soft_delete_booking(booking_id)
        return ok

    # Admin messages

    async def list_admin_messages(self, active_only: bool = True) -> list[AdminMessageRecord]:
        tier, messages = await self._call("list_admin_messages", active_only=active_only)
        if tier == "remote":
            for message in messages:
                self.local.remember_message(message)
        return messages

    async def create_admin_message(
        self, message: AdminMessageCreate, created_by: str
    ) -> AdminMessageRecord:
        tier, record = await self._call("create_admin_message", message, created_by)
        if tier == "remote":
            self.local.remember_message(record)
        return record

    async def update_admin_message(
        self, message_id: str, changes: dict
    ) -> Optional[AdminMessageRecord]:
        tier, record = await self._call("update_admin_message", message_id, changes)
        if tier == "remote" and record is not None:
            self.local.remember_message(record)
        return record

    async def delete_admin_message(self, message_id: str) -> bool:
        tier, ok = await self._call("delete_admin_message", message_id)
        if tier == "remote":
            self.local.forget_message(message_id)
        return ok

    # User profiles

    async def get_user_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        tier, record = await self._call("get_user_profile", user_id)
        if tier == "remote" and record is not None:
            self.local.remember_profile(record)
        return record

    async def upsert_user_profile(self, user_id: str, changes: dict) -> UserProfileRecord:
        tier, record = await self._call("upsert_user_profile", user_id, changes)
        if tier == "remote":
            self.local.remember_profile(record)
        return record
