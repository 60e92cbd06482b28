"""
Persistence gateway interface.
Both storage tiers and the tiered wrapper implement it with the same
inputs and outputs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from riding_club.schemas.booking import BookingDraft, BookingRecord, BookingStatus
from riding_club.schemas.message import PRIORITY_RANK, AdminMessageCreate, AdminMessageRecord
from riding_club.schemas.profile import UserProfileRecord


def order_messages(messages: list[AdminMessageRecord]) -> list[AdminMessageRecord]:
    """High before medium before low; newest first within a priority."""
    newest_first = sorted(messages, key=lambda m: m.created_at, reverse=True)
    return sorted(newest_first, key=lambda m: PRIORITY_RANK[m.priority], reverse=True)


class BookingGateway(ABC):
    """
    Storage contract consumed by the booking services.

    Implementations:
    - SqlStore: the remote database
    - LocalStore: in-process fallback store
    - TieredGateway: remote first, local when the remote is unreachable
    """

    tier: str = "unknown"

    async def ping(self) -> bool:
        """True when the store can serve calls. In-process stores always can."""
        return True

    # Bookings

    @abstractmethod
    async def create_booking(self, draft: BookingDraft) -> BookingRecord:
        """Persist a new booking with is_deleted=False and fresh timestamps."""

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        """Fetch one booking by id, soft-deleted or not."""

    @abstractmethod
    async def list_bookings(
        self, owner_id: Optional[str] = None, include_deleted: bool = False
    ) -> list[BookingRecord]:
        """Bookings ordered newest-created first."""

    @abstractmethod
    async def list_group_members(self, parent_id: str) -> list[BookingRecord]:
        """Live bookings whose parent_subscription_id is ``parent_id``. Excludes the parent."""

    @abstractmethod
    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, shared_riding: Optional[bool] = None
    ) -> bool:
        """Apply an approval transition. False when the booking does not exist."""

    @abstractmethod
    async def soft_delete_booking(self, booking_id: str) -> bool:
        """Set is_deleted and deleted_at. False when the booking does not exist."""

    # Admin messages

    @abstractmethod
    async def list_admin_messages(self, active_only: bool = True) -> list[AdminMessageRecord]:
        """Messages ordered by priority, then newest first."""

    @abstractmethod
    async def create_admin_message(
        self, message: AdminMessageCreate, created_by: str
    ) -> AdminMessageRecord:
        pass

    @abstractmethod
    async def update_admin_message(
        self, message_id: str, changes: dict
    ) -> Optional[AdminMessageRecord]:
        pass

    @abstractmethod
    async def delete_admin_message(self, message_id: str) -> bool:
        pass

    # User profiles

    @abstractmethod
    async def get_user_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        pass

    @abstractmethod
    async def upsert_user_profile(self, user_id: str, changes: dict) -> UserProfileRecord:
        """Merge ``changes`` into the profile, creating it with defaults if absent."""
