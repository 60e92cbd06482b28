"""
Pydantic schemas for bookings.

``BookingRecord`` is what both gateway tiers return, so callers never see
whether a row came from the remote store or the local fallback.
"""

import datetime as dt
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from riding_club.schemas.common import UtcDatetime


class Arena(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingType(str, Enum):
    MEMBER = "member"
    LESSON = "lesson"
    MAINTENANCE = "maintenance"
    COURSE = "course"
    EVENT = "event"


class BookingKind(str, Enum):
    SINGLE = "single"
    GROUP_PARENT = "group-parent"
    GROUP_MEMBER = "group-member"


def classify(is_subscription: bool, parent_subscription_id: Optional[str]) -> BookingKind:
    if parent_subscription_id:
        return BookingKind.GROUP_MEMBER
    if is_subscription:
        return BookingKind.GROUP_PARENT
    return BookingKind.SINGLE


class BookingTemplate(BaseModel):
    """Every booking field except identity, date and subscription linkage."""

    owner_id: str
    owner_display_name: str = ""
    arena: Arena
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus = BookingStatus.PENDING
    purpose: str = ""
    template_type: Optional[str] = None
    rake_required: bool = False
    shared_riding: bool = False
    current_riders: int = Field(default=1, ge=1)
    max_riders: int = Field(default=1, ge=1)
    booking_type: BookingType = BookingType.MEMBER

    model_config = {"use_enum_values": True}


class BookingDraft(BookingTemplate):
    """A booking ready to be written: a template placed on a date with an id."""

    id: str
    date: dt.date
    is_subscription: bool = False
    subscription_end_date: Optional[dt.date] = None
    parent_subscription_id: Optional[str] = None

    @computed_field
    @property
    def kind(self) -> BookingKind:
        return classify(self.is_subscription, self.parent_subscription_id)


class BookingRecord(BookingDraft):
    is_deleted: bool = False
    deleted_at: Optional[UtcDatetime] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}


class BookingSubmission(BaseModel):
    """
    Request body for a new booking. Fields arrive as raw strings and are
    parsed during validation, so a malformed value is reported alongside
    every other problem instead of short-circuiting the request.
    """

    arena: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    purpose: str = ""
    template_type: Optional[str] = None
    is_subscription: bool = False
    subscription_end_date: Optional[str] = None

    # Honoured for administrators only
    booking_type: Optional[str] = None
    rake_required: bool = False
    shared_riding: bool = False


class ValidSubmission(BaseModel):
    """A submission whose every field has been parsed and checked."""

    arena: Arena
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    purpose: str = ""
    template_type: Optional[str] = None
    is_subscription: bool = False
    subscription_end_date: Optional[dt.date] = None
    booking_type: BookingType = BookingType.MEMBER
    rake_required: bool = False
    shared_riding: bool = False


class SubmissionResponse(BaseModel):
    outcome: Literal["complete", "partial", "failed"]
    group_id: Optional[str] = None
    created: list[BookingRecord]
    failed_ids: list[str]


class ApprovalRequest(BaseModel):
    shared_riding: Optional[bool] = None


class FanOutResponse(BaseModel):
    operation: str
    target_id: str
    outcome: Literal["complete", "partial", "failed"]
    total: int
    succeeded: list[str]
    failed: list[str]


class PendingBookingResponse(BaseModel):
    booking: BookingRecord
    member_count: int


class BookingStatsResponse(BaseModel):
    total: int
    approved: int
    pending: int
    rejected: int
    indoor: int
    outdoor: int
    shared: int
    subscriptions: int
    total_capacity: int
    current_occupancy: int
    this_week_total: int
    this_week_approved: int
    this_week_pending: int
    peak_hour: Optional[int] = None
