"""
Club-wide notices shown on every member's dashboard.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, String, Text

from riding_club.db.base import Base, TimestampMixin


class AdminMessage(Base, TimestampMixin):
    __tablename__ = "admin_messages"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String(8), nullable=False, default="low")  # low, medium, high
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(128), nullable=False)

    __table_args__ = (
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="check_message_priority"),
        Index("ix_admin_messages_active_created", "is_active", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AdminMessage(id={self.id}, priority={self.priority}, active={self.is_active})>"
