"""
Member booking endpoints: submit, list, calendar and delete.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from riding_club.api.deps import get_coordinator, get_gateway, get_projection
from riding_club.core.logging import get_logger
from riding_club.core.security import Requester, get_current_requester
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.booking import (
    BookingRecord,
    BookingSubmission,
    FanOutResponse,
    SubmissionResponse,
)
from riding_club.services.booking_service import get_user_bookings, list_calendar, submit_booking
from riding_club.services.cache_service import (
    get_cached_calendar,
    invalidate_calendar_cache,
    set_cached_calendar,
)
from riding_club.services.group_coordinator import GroupLifecycleCoordinator
from riding_club.services.projection import BookingProjection

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    submission: BookingSubmission,
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
    projection: BookingProjection = Depends(get_projection),
):
    """
    Submit a single booking or a weekly subscription.

    Members' requests start pending; administrators' bookings are approved
    immediately. Returns 207 when only some weeks of a subscription could
    be stored, listing which ones were.
    """
    result = await submit_booking(gateway, projection, submission, requester)
    if result.created:
        await invalidate_calendar_cache()
    result.raise_for_outcome()
    return SubmissionResponse(
        outcome=result.outcome,
        group_id=result.group_id,
        created=result.created,
        failed_ids=result.failed,
    )


@router.get("/", response_model=list[BookingRecord])
async def list_my_bookings(
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
):
    """Live bookings of the authenticated member, newest first."""
    return await get_user_bookings(gateway, requester.user_id)


@router.get("/calendar", response_model=list[BookingRecord])
async def calendar(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
):
    """
    Approved bookings in a date range, shared by every member.
    Cached in Redis until the next booking write.
    """
    cached = await get_cached_calendar(start, end)
    if cached is not None:
        return cached

    bookings = await list_calendar(gateway, start, end)
    await set_cached_calendar(start, end, [b.model_dump(mode="json") for b in bookings])
    return bookings


async def _authorize_delete(
    coordinator: GroupLifecycleCoordinator, booking_id: str, requester: Requester
) -> None:
    booking = await coordinator.get_live(booking_id)
    if booking.owner_id != requester.user_id and not requester.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own bookings",
        )


@router.delete("/{booking_id}", response_model=FanOutResponse)
async def delete_booking(
    booking_id: str,
    requester: Requester = Depends(get_current_requester),
    coordinator: GroupLifecycleCoordinator = Depends(get_coordinator),
):
    """
    Delete a booking. On a subscription's first booking this deletes the
    whole subscription; on any other booking only that one.
    """
    await _authorize_delete(coordinator, booking_id, requester)
    result = await coordinator.delete_group(booking_id)
    await invalidate_calendar_cache()
    return result.raise_for_outcome().as_dict()


@router.delete("/{booking_id}/occurrence", response_model=FanOutResponse)
async def delete_occurrence(
    booking_id: str,
    requester: Requester = Depends(get_current_requester),
    coordinator: GroupLifecycleCoordinator = Depends(get_coordinator),
):
    """Delete exactly one booking, even when it is a subscription's first week."""
    await _authorize_delete(coordinator, booking_id, requester)
    result = await coordinator.delete_single(booking_id)
    await invalidate_calendar_cache()
    return result.raise_for_outcome().as_dict()
