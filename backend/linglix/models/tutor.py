# backend/linglix/models/tutor.py
"""
Tutor profile model.

Only the fields the booking flow reads are modelled here: whether the
tutor takes bookings at all (active + approved) and the hourly rate used
to price a session. User accounts live with the auth provider.
"""

import logging

from sqlalchemy import Boolean, Column, DateTime, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import ApprovalStatus
from ..database import Base

logger = logging.getLogger(__name__)


class TutorProfile(Base):
    """A tutor offering paid one-on-one sessions."""

    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    display_name = Column(String(255), nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    approval_status = Column(String(20), nullable=False, default=ApprovalStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    availability = relationship(
        "RecurringAvailability",
        back_populates="tutor",
        cascade="all, delete-orphan",
    )
    bookings = relationship("Booking", back_populates="tutor")

    @property
    def is_bookable(self) -> bool:
        return bool(self.is_active) and self.approval_status == ApprovalStatus.APPROVED.value

    def __repr__(self) -> str:
        return f"<TutorProfile {self.id} {self.approval_status}>"
