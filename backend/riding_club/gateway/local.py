"""
In-process fallback store.

Serves the gateway contract from plain dictionaries while the remote store
is unreachable. It also keeps a copy of everything the remote store hands
out, so a fallback read still shows recent bookings.
"""

from typing import Optional

from riding_club.core.logging import get_logger
from riding_club.db.base import utcnow
from riding_club.gateway.base import BookingGateway, order_messages
from riding_club.schemas.booking import BookingDraft, BookingRecord, BookingStatus
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord
from riding_club.schemas.profile import UserProfileRecord
from riding_club.services.approval import transition_fields
from riding_club.services.recurrence import new_id

logger = get_logger(__name__)

SEED_MESSAGES = [
    {
        "id": "msg_welcome",
        "title": "Welcome to the riding club booking system",
        "content": "Book your lessons and arena time here. Every booking is reviewed by the club office.",
        "priority": "medium",
    },
    {
        "id": "msg_offline",
        "title": "Running in offline mode",
        "content": "The club database is unreachable. New bookings are kept locally until it is back.",
        "priority": "low",
    },
]


class LocalStore(BookingGateway):
    tier = "local"

    def __init__(self, seed_messages: bool = False):
        self._bookings: dict[str, BookingRecord] = {}
        self._messages: dict[str, AdminMessageRecord] = {}
        self._profiles: dict[str, UserProfileRecord] = {}
        if seed_messages:
            self._seed()

    def _seed(self) -> None:
        now = utcnow()
        for data in SEED_MESSAGES:
            self._messages[data["id"]] = AdminMessageRecord(
                **data, is_active=True, created_by="system", created_at=now, updated_at=now
            )
        logger.info("local_store_seeded", messages=len(SEED_MESSAGES))

    def remember_booking(self, record: BookingRecord) -> None:
        self._bookings[record.id] = record.model_copy()

    def remember_message(self, record: AdminMessageRecord) -> None:
        self._messages[record.id] = record.model_copy()

    def remember_profile(self, record: UserProfileRecord) -> None:
        self._profiles[record.user_id] = record.model_copy()

    def forget_message(self, message_id: str) -> None:
        self._messages.pop(message_id, None)

    # Bookings

    async def create_booking(self, draft: BookingDraft) -> BookingRecord:
        now = utcnow()
        record = BookingRecord(
            **draft.model_dump(exclude={"kind"}),
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        self._bookings[record.id] = record
        return record.model_copy()

    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        record = self._bookings.get(booking_id)
        return record.model_copy() if record else None

    async def list_bookings(
        self, owner_id: Optional[str] = None, include_deleted: bool = False
    ) -> list[BookingRecord]:
        records = [
            b for b in self._bookings.values()
            if (include_deleted or not b.is_deleted)
            and (owner_id is None or b.owner_id == owner_id)
        ]
        records.sort(key=lambda b: (b.created_at, b.id), reverse=True)
        return [b.model_copy() for b in records]

    async def list_group_members(self, parent_id: str) -> list[BookingRecord]:
        members = [
            b for b in self._bookings.values()
            if b.parent_subscription_id == parent_id and not b.is_deleted
        ]
        members.sort(key=lambda b: b.date)
        return [b.model_copy() for b in members]

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, shared_riding: Optional[bool] = None
    ) -> bool:
        values = transition_fields(status, shared_riding)
        record = self._bookings.get(booking_id)
        if record is None:
            return False
        self._bookings[booking_id] = record.model_copy(update=values)
        return True

    async def soft_delete_booking(self, booking_id: str) -> bool:
        record = self._bookings.get(booking_id)
        if record is None:
            return False
        now = utcnow()
        self._bookings[booking_id] = record.model_copy(
            update={"is_deleted": True, "deleted_at": now, "updated_at": now}
        )
        return True

    # Admin messages

    async def list_admin_messages(self, active_only: bool = True) -> list[AdminMessageRecord]:
        messages = [m for m in self._messages.values() if m.is_active or not active_only]
        return [m.model_copy() for m in order_messages(messages)]

    async def create_admin_message(
        self, message: AdminMessageCreate, created_by: str
    ) -> AdminMessageRecord:
        now = utcnow()
        record = AdminMessageRecord(
            id=new_id("message"),
            **message.model_dump(),
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self._messages[record.id] = record
        return record.model_copy()

    async def update_admin_message(
        self, message_id: str, changes: dict
    ) -> Optional[AdminMessageRecord]:
        record = self._messages.get(message_id)
        if record is None:
            return None
        updated = record.model_validate({**record.model_dump(), **changes, "updated_at": utcnow()})
        self._messages[message_id] = updated
        return updated.model_copy()

    async def delete_admin_message(self, message_id: str) -> bool:
        return self._messages.pop(message_id, None) is not None

    # User profiles

    async def get_user_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        record = self._profiles.get(user_id)
        return record.model_copy() if record else None

    async def upsert_user_profile(self, user_id: str, changes: dict) -> UserProfileRecord:
        now = utcnow()
        record = self._profiles.get(user_id)
        if record is None:
            record = UserProfileRecord(
                id=new_id("profile"), user_id=user_id, created_at=now, updated_at=now, **changes
            )
        else:
            record = record.model_validate({**record.model_dump(), **changes, "updated_at": now})
        self._profiles[user_id] = record
        return record.model_copy()
