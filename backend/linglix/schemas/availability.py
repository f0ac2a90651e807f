"""
Recurring availability schemas for the Linglix platform.

Shape validation (weekday range, ``HH:MM`` format) happens here so the
availability engine only ever sees well-formed rows. Ordering and overlap
rules need the database and are enforced by AvailabilityService.
"""

from typing import List, Optional

from pydantic import ConfigDict, Field

from ..utils.time_utils import HHMM_PATTERN
from .base import StandardizedModel, StrictRequestModel


class RecurringAvailabilityCreate(StrictRequestModel):
    """Schema for creating a weekly availability window."""

    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday, 6 = Saturday")
    start_time: str = Field(..., pattern=HHMM_PATTERN, description="HH:MM, UTC")
    end_time: str = Field(..., pattern=HHMM_PATTERN, description="HH:MM, UTC")
    timezone: str = Field(default="UTC", max_length=64)
    is_active: bool = True


class RecurringAvailabilityUpdate(StrictRequestModel):
    """Schema for partially updating a window."""

    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    end_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    timezone: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None


class RecurringAvailabilityResponse(StandardizedModel):
    id: str
    tutor_id: str
    day_of_week: int
    start_time: str
    end_time: str
    timezone: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class RecurringAvailabilityListResponse(StandardizedModel):
    availability: List[RecurringAvailabilityResponse]


class RecurringAvailabilityMutationResponse(StandardizedModel):
    availability: RecurringAvailabilityResponse
    message: str


class DeleteAvailabilityResponse(StandardizedModel):
    success: bool = True
    message: str = "Availability deleted successfully"
