"""
Booking schemas for the Linglix platform.

Includes the three availability engine output shapes as served over HTTP:
single-slot verdicts, slot lists and available dates.
"""

import datetime
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from ..core.enums import BookingStatus
from .base import Money, StandardizedModel, StrictRequestModel

DateType = datetime.date
DateTimeType = datetime.datetime

DurationMinutes = Literal[30, 60, 90]


class BookingCreate(StrictRequestModel):
    """Create a booking; the caller has already authenticated ``student_id``."""

    tutor_id: str = Field(..., min_length=1, description="Tutor ID is required")
    student_id: str = Field(..., min_length=1)
    scheduled_at: DateTimeType
    duration: DurationMinutes
    notes: Optional[str] = Field(None, max_length=1000)


class BookingReschedule(StrictRequestModel):
    scheduled_at: DateTimeType


class BookingCancel(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus


class BookingResponse(StandardizedModel):
    id: str
    tutor_id: str
    student_id: str
    scheduled_at: DateTimeType
    end_at: Optional[DateTimeType] = None
    duration: int
    status: BookingStatus
    price: Money
    notes: Optional[str] = None
    payment_id: Optional[str] = None
    is_late_cancellation: bool = False
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[DateTimeType] = None
    completed_at: Optional[DateTimeType] = None
    created_at: Optional[DateTimeType] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class Pagination(StandardizedModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class BookingListResponse(StandardizedModel):
    bookings: List[BookingResponse]
    pagination: Pagination


class BookingCreateResponse(StandardizedModel):
    booking: BookingResponse
    message: str = "Booking created successfully. Please complete payment."


class AvailabilityCheckRequest(StrictRequestModel):
    tutor_id: str = Field(..., min_length=1)
    scheduled_at: DateTimeType
    duration: DurationMinutes
    exclude_booking_id: Optional[str] = None


class AvailabilityCheckResponse(StandardizedModel):
    available: bool
    reason: Optional[str] = None
    conflicting_booking: Optional[BookingResponse] = None


class TimeSlotResponse(StandardizedModel):
    start: DateTimeType
    end: DateTimeType
    available: bool
    reason: Optional[str] = None


class TutorAvailabilityResponse(StandardizedModel):
    """Slot list for one date, or available dates for a range."""

    tutor_id: str
    duration: int
    available: bool = True
    reason: Optional[str] = None
    date: Optional[DateType] = None
    start_date: Optional[DateType] = None
    end_date: Optional[DateType] = None
    slots: Optional[List[TimeSlotResponse]] = None
    available_dates: Optional[List[DateType]] = None
