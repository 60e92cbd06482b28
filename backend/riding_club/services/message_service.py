"""
Club notices: admins post them, every member sees the active ones.
"""

from riding_club.core.errors import MessageNotFoundError
from riding_club.core.logging import get_logger
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord, AdminMessageUpdate

logger = get_logger(__name__)


async def list_messages(gateway: BookingGateway, active_only: bool = True) -> list[AdminMessageRecord]:
    return await gateway.list_admin_messages(active_only=active_only)


async def create_message(
    gateway: BookingGateway, message: AdminMessageCreate, created_by: str
) -> AdminMessageRecord:
    record = await gateway.create_admin_message(message, created_by)
    logger.info("message_created", message_id=record.id, priority=record.priority, created_by=created_by)
    return record


async def update_message(
    gateway: BookingGateway, message_id: str, changes: AdminMessageUpdate
) -> AdminMessageRecord:
    values = changes.model_dump(exclude_unset=True, mode="json")
    record = await gateway.update_admin_message(message_id, values)
    if record is None:
        raise MessageNotFoundError(message_id)
    logger.info("message_updated", message_id=message_id, fields=sorted(values))
    return record


async def delete_message(gateway: BookingGateway, message_id: str) -> None:
    if not await gateway.delete_admin_message(message_id):
        raise MessageNotFoundError(message_id)
    logger.info("message_deleted", message_id=message_id)
