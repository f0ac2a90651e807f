# backend/linglix/routes/v1/availability.py
"""
Tutor availability window routes - API v1

Recurring weekly windows under /api/v1/tutors/{tutor_id}/availability.
All business logic delegated to AvailabilityService.

Endpoints:
    GET / - List the tutor's windows
    POST / - Create a window
    PATCH /{window_id} - Partially update a window
    DELETE /{window_id} - Delete a window
"""

import asyncio
import logging

from fastapi import APIRouter, Body, Depends, status

from ...api.dependencies import get_availability_service
from ...api.domain_errors import handle_domain_exception
from ...core.exceptions import DomainException
from ...schemas.availability import (
    DeleteAvailabilityResponse,
    RecurringAvailabilityCreate,
    RecurringAvailabilityListResponse,
    RecurringAvailabilityMutationResponse,
    RecurringAvailabilityResponse,
    RecurringAvailabilityUpdate,
)
from ...services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["availability-v1"])


@router.get("/{tutor_id}/availability", response_model=RecurringAvailabilityListResponse)
async def list_availability(
    tutor_id: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> RecurringAvailabilityListResponse:
    """All windows of the tutor, inactive ones included."""
    try:
        windows = await asyncio.to_thread(availability_service.list_windows, tutor_id)
    except DomainException as e:
        handle_domain_exception(e)

    return RecurringAvailabilityListResponse(
        availability=[RecurringAvailabilityResponse.model_validate(w) for w in windows]
    )


@router.post(
    "/{tutor_id}/availability",
    response_model=RecurringAvailabilityMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Overlaps an existing window"}},
)
async def create_availability(
    tutor_id: str,
    payload: RecurringAvailabilityCreate = Body(...),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> RecurringAvailabilityMutationResponse:
    try:
        window = await asyncio.to_thread(availability_service.create_window, tutor_id, payload)
    except DomainException as e:
        handle_domain_exception(e)

    return RecurringAvailabilityMutationResponse(
        availability=RecurringAvailabilityResponse.model_validate(window),
        message="Availability created successfully",
    )


@router.patch(
    "/{tutor_id}/availability/{window_id}",
    response_model=RecurringAvailabilityMutationResponse,
    responses={404: {"description": "Availability not found"}},
)
async def update_availability(
    tutor_id: str,
    window_id: str,
    payload: RecurringAvailabilityUpdate = Body(...),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> RecurringAvailabilityMutationResponse:
    try:
        window = await asyncio.to_thread(
            availability_service.update_window, tutor_id, window_id, payload
        )
    except DomainException as e:
        handle_domain_exception(e)

    return RecurringAvailabilityMutationResponse(
        availability=RecurringAvailabilityResponse.model_validate(window),
        message="Availability updated successfully",
    )


@router.delete(
    "/{tutor_id}/availability/{window_id}",
    response_model=DeleteAvailabilityResponse,
    responses={404: {"description": "Availability not found"}},
)
async def delete_availability(
    tutor_id: str,
    window_id: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> DeleteAvailabilityResponse:
    try:
        await asyncio.to_thread(availability_service.delete_window, tutor_id, window_id)
    except DomainException as e:
        handle_domain_exception(e)

    return DeleteAvailabilityResponse()
