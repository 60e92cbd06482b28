"""
Member-supplied profile attributes, keyed by the identity provider's user id.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, String

from riding_club.db.base import Base, TimestampMixin


class UserProfile(Base, TimestampMixin):
    __tablename__ = "user_profiles"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(128), nullable=False, unique=True, index=True)
    display_name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    emergency_contact = Column(String(255), nullable=False, default="")
    emergency_phone = Column(String(64), nullable=False, default="")
    horse_name = Column(String(255), nullable=False, default="")
    membership_type = Column(String(32), nullable=False, default="member")
    status = Column(String(16), nullable=False, default="pending")  # pending, approved, rejected
    approved_by = Column(String(128), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="check_profile_status"),
    )

    def __repr__(self) -> str:
        return f"<UserProfile(user={self.user_id}, status={self.status})>"
