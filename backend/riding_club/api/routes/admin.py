"""
Administrator endpoints: the approval queue, group decisions and member approval.
"""

from fastapi import APIRouter, Depends

from riding_club.api.deps import get_coordinator, get_gateway, get_projection
from riding_club.core.logging import get_logger
from riding_club.core.security import Requester, require_admin
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.booking import (
    ApprovalRequest,
    BookingStatsResponse,
    FanOutResponse,
    PendingBookingResponse,
)
from riding_club.schemas.profile import UserProfileRecord
from riding_club.services.cache_service import invalidate_calendar_cache
from riding_club.services.group_coordinator import GroupLifecycleCoordinator
from riding_club.services.profile_service import set_membership_status
from riding_club.services.projection import BookingProjection
from riding_club.services.stats_service import compute_stats, pending_queue

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/bookings/pending", response_model=list[PendingBookingResponse])
async def list_pending(
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
    projection: BookingProjection = Depends(get_projection),
):
    """
    Pending requests, one per subscription. Served from the booking
    projection, refreshed first when the store is reachable.
    """
    await projection.refresh(gateway)
    return [
        PendingBookingResponse(booking=booking, member_count=size)
        for booking, size in pending_queue(projection.all())
    ]


@router.post("/bookings/{booking_id}/approve", response_model=FanOutResponse)
async def approve_booking(
    booking_id: str,
    decision: ApprovalRequest | None = None,
    admin: Requester = Depends(require_admin),
    coordinator: GroupLifecycleCoordinator = Depends(get_coordinator),
):
    """Approve a booking, or every week of a subscription when given its first booking."""
    shared_riding = decision.shared_riding if decision and decision.shared_riding is not None else False
    result = await coordinator.approve_group(booking_id, shared_riding=shared_riding)
    await invalidate_calendar_cache()
    logger.info("booking_approved", booking_id=booking_id, admin=admin.user_id, shared_riding=shared_riding)
    return result.raise_for_outcome().as_dict()


@router.post("/bookings/{booking_id}/reject", response_model=FanOutResponse)
async def reject_booking(
    booking_id: str,
    admin: Requester = Depends(require_admin),
    coordinator: GroupLifecycleCoordinator = Depends(get_coordinator),
):
    """Reject a booking, or every week of a subscription when given its first booking."""
    result = await coordinator.reject_group(booking_id)
    await invalidate_calendar_cache()
    logger.info("booking_rejected", booking_id=booking_id, admin=admin.user_id)
    return result.raise_for_outcome().as_dict()


@router.get("/bookings/stats", response_model=BookingStatsResponse)
async def booking_stats(
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
    projection: BookingProjection = Depends(get_projection),
):
    await projection.refresh(gateway)
    return compute_stats(projection.all())


@router.post("/users/{user_id}/approve", response_model=UserProfileRecord)
async def approve_member(
    user_id: str,
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
):
    return await set_membership_status(gateway, user_id, "approved", admin.user_id)


@router.post("/users/{user_id}/reject", response_model=UserProfileRecord)
async def reject_member(
    user_id: str,
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
):
    return await set_membership_status(gateway, user_id, "rejected", admin.user_id)
