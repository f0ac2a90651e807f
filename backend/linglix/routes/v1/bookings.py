# backend/linglix/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService and ConflictChecker.

Endpoints:
    GET /availability - Slots for a date, or available dates for a range
    POST /check-availability - Check if one proposed booking is possible
    GET / - List bookings with filters and pagination
    POST / - Create a booking
    GET /{booking_id} - Full booking details
    POST /{booking_id}/cancel - Cancel a booking
    POST /{booking_id}/reschedule - Move a booking to a new start
    PATCH /{booking_id}/status - Lifecycle status change
"""

import asyncio
import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.params import Path

from ...api.dependencies import get_booking_service, get_conflict_checker
from ...api.domain_errors import handle_domain_exception
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...schemas.booking import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    BookingCancel,
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingReschedule,
    BookingResponse,
    BookingStatusUpdate,
    Pagination,
    TutorAvailabilityResponse,
)
from ...services.booking_service import BookingService
from ...services.conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.get("/availability", response_model=TutorAvailabilityResponse)
async def get_tutor_availability(
    tutor_id: str = Query(..., min_length=1),
    date: Optional[datetime.date] = Query(None, description="Single UTC date to list slots for"),
    start_date: Optional[datetime.date] = Query(None),
    end_date: Optional[datetime.date] = Query(None),
    duration: int = Query(60, description="Session length in minutes"),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> TutorAvailabilityResponse:
    """
    Slots for one date, or the dates with at least one free slot.

    Without ``date`` or a range, the next seven days are returned.
    """
    if duration not in (30, 60, 90):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Duration must be 30, 60, or 90 minutes",
        )
    try:
        return await asyncio.to_thread(
            conflict_checker.get_tutor_availability,
            tutor_id,
            duration,
            day=date,
            start_date=start_date,
            end_date=end_date,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/check-availability", response_model=AvailabilityCheckResponse)
async def check_availability(
    check_data: AvailabilityCheckRequest = Body(...),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> AvailabilityCheckResponse:
    """
    Check if a time range is available for booking.

    Advisory only: POST / re-checks when the booking is written.
    """
    try:
        result = await asyncio.to_thread(
            conflict_checker.check_availability,
            check_data.tutor_id,
            check_data.scheduled_at,
            check_data.duration,
            exclude_booking_id=check_data.exclude_booking_id,
        )
    except DomainException as e:
        handle_domain_exception(e)

    conflicting = (
        BookingResponse.model_validate(result.conflicting_booking)
        if result.conflicting_booking is not None
        else None
    )
    return AvailabilityCheckResponse(
        available=result.available,
        reason=result.reason,
        conflicting_booking=conflicting,
    )


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    tutor_id: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """List bookings with optional filters, newest first."""
    try:
        bookings, total, page_size = await asyncio.to_thread(
            booking_service.list_bookings,
            tutor_id=tutor_id,
            student_id=student_id,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    except DomainException as e:
        handle_domain_exception(e)

    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination(
            total=total,
            limit=page_size,
            offset=offset,
            has_more=offset + len(bookings) < total,
        ),
    )


@router.post(
    "",
    response_model=BookingCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Time conflict"}},
)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingCreateResponse:
    """Create a PENDING booking for the student named in the body."""
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, booking_data)
        return BookingCreateResponse(booking=BookingResponse.model_validate(booking))
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Routes with a booking_id path parameter
# ============================================================================


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: str = Path(
        ...,
        description="Booking ULID",
        pattern=ULID_PATH_PATTERN,
        examples=["01HF4G12ABCDEF3456789XYZAB"],
    ),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def cancel_booking(
    booking_id: str = Path(
        ...,
        description="Booking ULID",
        pattern=ULID_PATH_PATTERN,
        examples=["01HF4G12ABCDEF3456789XYZAB"],
    ),
    cancel_data: Optional[BookingCancel] = Body(None),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Cancel a booking."""
    try:
        booking = await asyncio.to_thread(
            booking_service.cancel_booking,
            booking_id,
            reason=cancel_data.reason if cancel_data else None,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/reschedule",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}, 409: {"description": "Time conflict"}},
)
async def reschedule_booking(
    booking_id: str = Path(
        ...,
        description="Booking ULID",
        pattern=ULID_PATH_PATTERN,
        examples=["01HF4G12ABCDEF3456789XYZAB"],
    ),
    payload: BookingReschedule = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.reschedule_booking, booking_id, payload.scheduled_at
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def update_booking_status(
    booking_id: str = Path(
        ...,
        description="Booking ULID",
        pattern=ULID_PATH_PATTERN,
        examples=["01HF4G12ABCDEF3456789XYZAB"],
    ),
    payload: BookingStatusUpdate = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Move a booking along its lifecycle (PENDING -> CONFIRMED -> COMPLETED)."""
    try:
        booking = await asyncio.to_thread(booking_service.update_status, booking_id, payload.status)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
