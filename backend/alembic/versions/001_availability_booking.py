# backend/alembic/versions/001_availability_booking.py
"""Tutor profiles, recurring availability and bookings

Revision ID: 001_availability_booking
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the three tables the availability engine reads: tutor profiles
(bookable flag + hourly rate), weekly availability windows and bookings.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_availability_booking"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tutor, availability and booking tables."""
    op.create_table(
        "tutor_profiles",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tutor_profiles_user_id", "tutor_profiles", ["user_id"], unique=True)

    op.create_table(
        "availability",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False, server_default="UTC"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutor_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week"),
    )
    op.create_index(
        "idx_availability_tutor_day", "availability", ["tutor_id", "day_of_week"]
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("payment_id", sa.String(255), nullable=True, comment="Checkout session ID"),
        sa.Column(
            "is_late_cancellation", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["tutor_id"], ["tutor_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration > 0", name="check_duration_positive"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_student_id", "bookings", ["student_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("idx_bookings_tutor_scheduled", "bookings", ["tutor_id", "scheduled_at"])


def downgrade() -> None:
    """Drop booking, availability and tutor tables."""
    op.drop_index("idx_bookings_tutor_scheduled", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_student_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("idx_availability_tutor_day", table_name="availability")
    op.drop_table("availability")

    op.drop_index("ix_tutor_profiles_user_id", table_name="tutor_profiles")
    op.drop_table("tutor_profiles")
