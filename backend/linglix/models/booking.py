# backend/linglix/models/booking.py
"""
Booking model for the Linglix platform.

A booking reserves ``[scheduled_at, scheduled_at + duration)`` of a tutor's
time for one student. Cancelled and refunded bookings keep their row but
stop occupying the interval.
"""

from datetime import datetime, timedelta
import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import BookingStatus
from ..database import Base
from ..utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)

__all__ = ["Booking", "BookingStatus"]


class Booking(Base):
    """Paid one-on-one session between a student and a tutor."""

    __tablename__ = "bookings"

    # Primary key
    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    # Core relationships
    tutor_id = Column(String(26), ForeignKey("tutor_profiles.id"), nullable=False)
    student_id = Column(String(64), nullable=False, index=True)

    # Interval
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, nullable=False)

    # Booking details
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)
    payment_id = Column(String(255), nullable=True, comment="Checkout session ID")

    # Cancellation tracking
    is_late_cancellation = Column(Boolean, nullable=False, default=False)
    cancellation_reason = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    tutor = relationship("TutorProfile", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("duration > 0", name="check_duration_positive"),
        Index("idx_bookings_tutor_scheduled", "tutor_id", "scheduled_at"),
    )

    @property
    def end_at(self) -> datetime:
        return ensure_utc(self.scheduled_at) + timedelta(minutes=self.duration)

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.scheduled_at} {self.duration}m {self.status}>"
