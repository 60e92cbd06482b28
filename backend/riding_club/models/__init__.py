from riding_club.models.admin_message import AdminMessage
from riding_club.models.booking import Booking
from riding_club.models.user_profile import UserProfile

__all__ = ["AdminMessage", "Booking", "UserProfile"]
