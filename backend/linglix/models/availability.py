# backend/linglix/models/availability.py
"""
Recurring weekly availability for tutors.

Each row is one window on one weekday (0 = Sunday) expressed as ``HH:MM``
wall-clock strings in UTC. Active windows of the same tutor and weekday
never overlap; AvailabilityService rejects overlapping inserts and updates.
"""

import logging

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class RecurringAvailability(Base):
    """A tutor's weekly availability window."""

    __tablename__ = "availability"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    tutor_id = Column(
        String(26), ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    # Stored for display only; interval math is done in UTC.
    timezone = Column(String(64), nullable=False, default="UTC")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    tutor = relationship("TutorProfile", back_populates="availability")

    # Constraints
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week"),
        Index("idx_availability_tutor_day", "tutor_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return f"<RecurringAvailability day={self.day_of_week} {self.start_time}-{self.end_time}>"
