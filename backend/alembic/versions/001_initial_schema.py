"""Initial schema: bookings, admin messages and user profiles.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("owner_display_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("arena", sa.String(16), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("purpose", sa.String(500), nullable=False, server_default=""),
        sa.Column("template_type", sa.String(64), nullable=True),
        sa.Column("rake_required", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("shared_riding", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("current_riders", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("max_riders", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("booking_type", sa.String(16), nullable=False, server_default=sa.text("'member'")),
        sa.Column("is_subscription", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("subscription_end_date", sa.Date(), nullable=True),
        sa.Column("parent_subscription_id", sa.String(64), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("arena IN ('indoor', 'outdoor')", name="check_booking_arena"),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="check_booking_status"),
        sa.CheckConstraint(
            "booking_type IN ('member', 'lesson', 'maintenance', 'course', 'event')",
            name="check_booking_type",
        ),
        sa.CheckConstraint("current_riders >= 1", name="check_current_riders_positive"),
        sa.CheckConstraint("max_riders >= 1", name="check_max_riders_positive"),
        sa.CheckConstraint("end_time > start_time", name="check_booking_time_order"),
    )
    op.create_index("ix_bookings_owner_id", "bookings", ["owner_id"])
    # Group fan-out resolves members by their parent id
    op.create_index("ix_bookings_parent_subscription_id", "bookings", ["parent_subscription_id"])
    op.create_index("ix_bookings_date_status", "bookings", ["date", "status"])
    op.create_index("ix_bookings_deleted_created", "bookings", ["is_deleted", "created_at"])

    op.create_table(
        "admin_messages",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(8), nullable=False, server_default=sa.text("'low'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high')", name="check_message_priority"),
    )
    op.create_index("ix_admin_messages_active_created", "admin_messages", ["is_active", "created_at"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone", sa.String(64), nullable=False, server_default=""),
        sa.Column("emergency_contact", sa.String(255), nullable=False, server_default=""),
        sa.Column("emergency_phone", sa.String(64), nullable=False, server_default=""),
        sa.Column("horse_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("membership_type", sa.String(32), nullable=False, server_default=sa.text("'member'")),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("approved_by", sa.String(128), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="check_profile_status"),
    )
    op.create_index("ix_user_profiles_user_id", "user_profiles", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_table("user_profiles")
    op.drop_table("admin_messages")
    op.drop_table("bookings")
