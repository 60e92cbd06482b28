"""
Booking submission and member-facing queries.

A submission is validated as a whole, expanded into weekly instances when it
is a subscription, and then written instance by instance. One failed write
does not stop the others; the caller learns which instances exist.
"""

from datetime import date
from typing import Optional

from riding_club.core.errors import SubmissionValidationError
from riding_club.core.logging import get_logger
from riding_club.core.metrics import booking_instances_created, record_submission
from riding_club.core.security import Requester
from riding_club.gateway.base import BookingGateway
from riding_club.schemas.booking import (
    BookingDraft,
    BookingRecord,
    BookingStatus,
    BookingSubmission,
    BookingTemplate,
    BookingType,
    ValidSubmission,
)
from riding_club.services.approval import capacity_for
from riding_club.services.projection import BookingProjection
from riding_club.services.recurrence import expand_weekly, new_id
from riding_club.services.results import SubmissionResult
from riding_club.services.validation import validate_submission

logger = get_logger(__name__)


def build_template(submission: ValidSubmission, requester: Requester) -> BookingTemplate:
    """
    Members always start pending with a single rider; sharing is decided at
    approval. Administrators book approved slots and may set type and sharing.
    """
    if requester.is_admin:
        return BookingTemplate(
            owner_id=requester.user_id,
            owner_display_name=requester.display_name,
            arena=submission.arena,
            start_time=submission.start_time,
            end_time=submission.end_time,
            status=BookingStatus.APPROVED,
            purpose=submission.purpose,
            template_type=submission.template_type,
            rake_required=submission.rake_required,
            shared_riding=submission.shared_riding,
            max_riders=capacity_for(submission.shared_riding),
            booking_type=submission.booking_type,
        )

    return BookingTemplate(
        owner_id=requester.user_id,
        owner_display_name=requester.display_name,
        arena=submission.arena,
        start_time=submission.start_time,
        end_time=submission.end_time,
        status=BookingStatus.PENDING,
        purpose=submission.purpose,
        template_type=submission.template_type,
        booking_type=BookingType.MEMBER,
    )


def build_drafts(submission: ValidSubmission, requester: Requester) -> list[BookingDraft]:
    template = build_template(submission, requester)
    if submission.is_subscription:
        return expand_weekly(submission.date, submission.subscription_end_date, template)
    return [BookingDraft(**template.model_dump(), id=new_id("booking"), date=submission.date)]


async def submit_booking(
    gateway: BookingGateway,
    projection: BookingProjection,
    submission: BookingSubmission,
    requester: Requester,
) -> SubmissionResult:
    """
    Validate, expand and persist a booking request.

    Raises SubmissionValidationError before anything is written. Otherwise
    every instance is attempted and the result reports which were created.
    """
    try:
        valid = validate_submission(submission)
    except SubmissionValidationError:
        record_submission(requester.role, "invalid")
        raise

    drafts = build_drafts(valid, requester)
    result = SubmissionResult(
        operation="submit",
        target_id=drafts[0].id,
        group_id=drafts[0].id if drafts[0].is_subscription else None,
    )

    for draft in drafts:
        try:
            record = await gateway.create_booking(draft)
        except Exception as e:
            logger.error("booking_instance_failed", booking_id=draft.id, date=str(draft.date), error=str(e))
            result.failed.append(draft.id)
            continue
        result.created.append(record)
        result.succeeded.append(record.id)
        booking_instances_created.inc()

    projection.add(result.created)
    record_submission(requester.role, result.outcome)
    logger.info(
        "booking_submitted",
        owner_id=requester.user_id,
        booking_id=result.target_id,
        subscription=submission.is_subscription,
        created=len(result.created),
        failed=len(result.failed),
        outcome=result.outcome,
    )

    await projection.refresh(gateway)
    return result


async def get_user_bookings(gateway: BookingGateway, owner_id: str) -> list[BookingRecord]:
    return await gateway.list_bookings(owner_id=owner_id)


async def list_calendar(
    gateway: BookingGateway,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[BookingRecord]:
    """Approved, live bookings in [start, end], ordered by date and start time."""
    bookings = await gateway.list_bookings()
    visible = [
        b for b in bookings
        if b.status == BookingStatus.APPROVED
        and (start is None or b.date >= start)
        and (end is None or b.date <= end)
    ]
    return sorted(visible, key=lambda b: (b.date, b.start_time, b.arena))
