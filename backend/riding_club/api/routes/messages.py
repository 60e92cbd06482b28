"""
Club notice endpoints. Everyone reads; administrators write.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from riding_club.api.deps import get_gateway
from riding_club.core.security import Requester, get_current_requester, require_admin
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord, AdminMessageUpdate
from riding_club.services.message_service import (
    create_message,
    delete_message,
    list_messages,
    update_message,
)

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/", response_model=list[AdminMessageRecord])
async def list_messages_endpoint(
    include_inactive: bool = Query(False),
    requester: Requester = Depends(get_current_requester),
    gateway: BookingGateway = Depends(get_gateway),
):
    """Notices ordered by priority (high first), newest first within a priority."""
    active_only = not (include_inactive and requester.is_admin)
    return await list_messages(gateway, active_only=active_only)


@router.post("/", response_model=AdminMessageRecord, status_code=status.HTTP_201_CREATED)
async def create_message_endpoint(
    message: AdminMessageCreate,
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
):
    return await create_message(gateway, message, admin.user_id)


@router.patch("/{message_id}", response_model=AdminMessageRecord)
async def update_message_endpoint(
    message_id: str,
    changes: AdminMessageUpdate,
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
):
    return await update_message(gateway, message_id, changes)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message_endpoint(
    message_id: str,
    admin: Requester = Depends(require_admin),
    gateway: BookingGateway = Depends(get_gateway),
):
    await delete_message(gateway, message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
