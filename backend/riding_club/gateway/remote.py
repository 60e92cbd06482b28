"""
SQLAlchemy-backed remote store.

Every call opens its own session and commits on success, so the members of
a group fan-out are written independently of each other. Connection level
failures surface as BackendUnavailable; data errors propagate unchanged.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import case, select, text, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from riding_club.core.errors import BackendUnavailable
from riding_club.core.logging import get_logger
from riding_club.db.base import utcnow
from riding_club.gateway.base import BookingGateway
from riding_club.models import AdminMessage, Booking, UserProfile
from riding_club.schemas.booking import BookingDraft, BookingRecord, BookingStatus
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord
from riding_club.schemas.profile import UserProfileRecord
from riding_club.services.approval import transition_fields
from riding_club.services.recurrence import new_id

logger = get_logger(__name__)

PRIORITY_ORDER = case(
    (AdminMessage.priority == "high", 3),
    (AdminMessage.priority == "medium", 2),
    else_=1,
)


class SqlStore(BookingGateway):
    tier = "remote"

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessionmaker() as session:
                yield session
                await session.commit()
        except (OperationalError, InterfaceError, OSError) as e:
            raise BackendUnavailable(str(e)) from e

    async def ping(self) -> bool:
        async with self._session() as session:
            await session.execute(text("SELECT 1"))
        return True

    # Bookings

    async def create_booking(self, draft: BookingDraft) -> BookingRecord:
        values = draft.model_dump(exclude={"kind"})
        async with self._session() as session:
            booking = Booking(**values, is_deleted=False)
            session.add(booking)
            await session.flush()
            await session.refresh(booking)
            return BookingRecord.model_validate(booking)

    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        async with self._session() as session:
            booking = await session.get(Booking, booking_id)
            return BookingRecord.model_validate(booking) if booking else None

    async def list_bookings(
        self, owner_id: Optional[str] = None, include_deleted: bool = False
    ) -> list[BookingRecord]:
        query = select(Booking)
        if not include_deleted:
            query = query.where(Booking.is_deleted.is_(False))
        if owner_id is not None:
            query = query.where(Booking.owner_id == owner_id)
        query = query.order_by(Booking.created_at.desc(), Booking.id.desc())

        async with self._session() as session:
            result = await session.execute(query)
            return [BookingRecord.model_validate(b) for b in result.scalars().all()]

    async def list_group_members(self, parent_id: str) -> list[BookingRecord]:
        query = (
            select(Booking)
            .where(
                Booking.parent_subscription_id == parent_id,
                Booking.is_deleted.is_(False),
            )
            .order_by(Booking.date.asc())
        )
        async with self._session() as session:
            result = await session.execute(query)
            return [BookingRecord.model_validate(b) for b in result.scalars().all()]

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, shared_riding: Optional[bool] = None
    ) -> bool:
        values = transition_fields(status, shared_riding)
        async with self._session() as session:
            result = await session.execute(
                update(Booking).where(Booking.id == booking_id).values(**values)
            )
            return result.rowcount > 0

    async def soft_delete_booking(self, booking_id: str) -> bool:
        now = utcnow()
        async with self._session() as session:
            result = await session.execute(
                update(Booking)
                .where(Booking.id == booking_id)
                .values(is_deleted=True, deleted_at=now, updated_at=now)
            )
            return result.rowcount > 0

    # Admin messages

    async def list_admin_messages(self, active_only: bool = True) -> list[AdminMessageRecord]:
        query = select(AdminMessage)
        if active_only:
            query = query.where(AdminMessage.is_active.is_(True))
        query = query.order_by(PRIORITY_ORDER.desc(), AdminMessage.created_at.desc())

        async with self._session() as session:
            result = await session.execute(query)
            return [AdminMessageRecord.model_validate(m) for m in result.scalars().all()]

    async def create_admin_message(
        self, message: AdminMessageCreate, created_by: str
    ) -> AdminMessageRecord:
        async with self._session() as session:
            row = AdminMessage(
                id=new_id("message"),
                title=message.title,
                content=message.content,
                priority=message.priority.value,
                is_active=message.is_active,
                created_by=created_by,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return AdminMessageRecord.model_validate(row)

    async def update_admin_message(
        self, message_id: str, changes: dict
    ) -> Optional[AdminMessageRecord]:
        async with self._session() as session:
            row = await session.get(AdminMessage, message_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            await session.flush()
            await session.refresh(row)
            return AdminMessageRecord.model_validate(row)

    async def delete_admin_message(self, message_id: str) -> bool:
        async with self._session() as session:
            row = await session.get(AdminMessage, message_id)
            if row is None:
                return False
            await session.delete(row)
            return True

    # User profiles

    async def get_user_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(UserProfile).where(UserProfile.user_id == user_id).limit(1)
            )
            row = result.scalar_one_or_none()
            return UserProfileRecord.model_validate(row) if row else None

    async def upsert_user_profile(self, user_id: str, changes: dict) -> UserProfileRecord:
        async with self._session() as session:
            result = await session.execute(
                select(UserProfile).where(UserProfile.user_id == user_id).limit(1)
            )
            row = result.scalar_one_or_none()
            if row is None:
                row = UserProfile(id=new_id("profile"), user_id=user_id, **changes)
                session.add(row)
                logger.info("profile_created", user_id=user_id)
            else:
                for key, value in changes.items():
                    setattr(row, key, value)
                row.updated_at = utcnow()
            await session.flush()
            await session.refresh(row)
            return UserProfileRecord.model_validate(row)
