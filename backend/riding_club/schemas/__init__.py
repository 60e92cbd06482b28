from riding_club.schemas.booking import (
    BookingDraft, BookingKind, BookingRecord, BookingSubmission, BookingTemplate, ValidSubmission,
)
from riding_club.schemas.message import AdminMessageCreate, AdminMessageRecord, AdminMessageUpdate
from riding_club.schemas.profile import UserProfileRecord, UserProfileUpdate

__all__ = [
    "BookingDraft", "BookingKind", "BookingRecord", "BookingSubmission", "BookingTemplate", "ValidSubmission",
    "AdminMessageCreate", "AdminMessageRecord", "AdminMessageUpdate",
    "UserProfileRecord", "UserProfileUpdate",
]
