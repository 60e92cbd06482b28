"""
Booking model: one arena reservation, possibly one week of a subscription.

Key design decisions:
- String ids so group members can be created independently of each other
- parent_subscription_id is a plain indexed column, not a foreign key: a
  member may be written while its parent's write failed
- is_deleted/deleted_at implement soft deletion; rows are never purged
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Index, Integer, String, Time

from riding_club.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(64), primary_key=True)
    owner_id = Column(String(128), nullable=False, index=True)
    owner_display_name = Column(String(255), nullable=False, default="")
    arena = Column(String(16), nullable=False)  # indoor, outdoor
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(16), nullable=False, default="pending")  # pending, approved, rejected
    purpose = Column(String(500), nullable=False, default="")
    template_type = Column(String(64), nullable=True)
    rake_required = Column(Boolean, nullable=False, default=False)
    shared_riding = Column(Boolean, nullable=False, default=False)
    current_riders = Column(Integer, nullable=False, default=1)
    max_riders = Column(Integer, nullable=False, default=1)
    booking_type = Column(String(16), nullable=False, default="member")

    # Subscription linkage
    is_subscription = Column(Boolean, nullable=False, default=False)
    subscription_end_date = Column(Date, nullable=True)
    parent_subscription_id = Column(String(64), nullable=True, index=True)

    # Soft delete
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("arena IN ('indoor', 'outdoor')", name="check_booking_arena"),
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="check_booking_status"),
        CheckConstraint(
            "booking_type IN ('member', 'lesson', 'maintenance', 'course', 'event')",
            name="check_booking_type",
        ),
        CheckConstraint("current_riders >= 1", name="check_current_riders_positive"),
        CheckConstraint("max_riders >= 1", name="check_max_riders_positive"),
        CheckConstraint("end_time > start_time", name="check_booking_time_order"),
        # Calendar queries: approved, live bookings in a date range
        Index("ix_bookings_date_status", "date", "status"),
        Index("ix_bookings_deleted_created", "is_deleted", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, owner={self.owner_id}, date={self.date}, status={self.status})>"
