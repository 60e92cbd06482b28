"""
Profile endpoints for the authenticated member.
"""

from fastapi import APIRouter, Depends

from riding_club.api.deps import get_gateway
from riding_club.core.security import Requester, get_current_requester
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.profile import UserProfileRecord, UserProfileUpdate
from riding_club.services.profile_service import get_profile, update_profile

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me", response_model=UserProfileRecord)
async def read_my_profile(
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
):
    return await get_profile(gateway, requester.user_id)


@router.put("/me", response_model=UserProfileRecord)
async def update_my_profile(
    changes: UserProfileUpdate,
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
):
    """Create or update the member's profile. Only the fields sent are changed."""
    return await update_profile(gateway, requester.user_id, changes)
