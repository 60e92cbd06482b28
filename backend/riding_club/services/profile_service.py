"""
Member profiles. Stored as given; the only rule is who may approve them.
"""

from riding_club.core.errors import ProfileNotFoundError
from riding_club.core.logging import get_logger
from riding_club.db.base import utcnow
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.profile import UserProfileRecord, UserProfileUpdate

logger = get_logger(__name__)


async def get_profile(gateway: BookingGateway, user_id: str) -> UserProfileRecord:
    profile = await gateway.get_user_profile(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


async def update_profile(
    gateway: BookingGateway, user_id: str, changes: UserProfileUpdate
) -> UserProfileRecord:
    values = changes.model_dump(exclude_unset=True, exclude_none=True)
    profile = await gateway.upsert_user_profile(user_id, values)
    logger.info("profile_updated", user_id=user_id, fields=sorted(values))
    return profile


async def set_membership_status(
    gateway: BookingGateway, user_id: str, status: str, decided_by: str
) -> UserProfileRecord:
    if await gateway.get_user_profile(user_id) is None:
        raise ProfileNotFoundError(user_id)

    values = {"status": status}
    if status == "approved":
        values.update(approved_by=decided_by, approved_at=utcnow())
    profile = await gateway.upsert_user_profile(user_id, values)
    logger.info("membership_decided", user_id=user_id, status=status, decided_by=decided_by)
    return profile
