"""
Plan Scheduling API Routes.

Endpoints to generate (or regenerate) a production plan's machine schedule, print
preview a plan's chain, and read or change the daily scheduling window.
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status

from shopfloor.api.deps import ScheduleServiceDep
from shopfloor.application.dtos.scheduling_dtos import (
    ScheduleResponse,
    WindowPreferenceRequest,
    WindowPreferenceResponse,
)
from shopfloor.domain.scheduling.services.schedule_assigner import AssignmentMode
from shopfloor.domain.shared.exceptions import DomainError, ErrorType
from shopfloor.infrastructure.preferences.window_preferences import WindowPreference

router = APIRouter()

_STATUS_BY_ERROR_TYPE = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.BUSINESS_RULE: status.HTTP_409_CONFLICT,
    ErrorType.RESOURCE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorType.REPOSITORY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(error: DomainError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_ERROR_TYPE.get(
            error.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail=error.to_dict(),
    )


@router.post(
    "/plans/{plan_id}/schedule",
    summary="Generate plan schedule",
    description="Place every operation of a plan on its machine and store the result.",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Operations cannot be scheduled with this configuration"},
        404: {"description": "Plan or machine not found"},
        409: {"description": "Plan already has a schedule"},
    },
)
def generate_schedule(
    plan_id: str,
    service: ScheduleServiceDep,
    regenerate: bool = Query(False, description="Replace an existing schedule"),
    mode: AssignmentMode = Query(AssignmentMode.MACHINE_AWARE),
) -> ScheduleResponse:
    try:
        outcome = service.generate(plan_id, regenerate=regenerate, mode=mode)
    except DomainError as e:
        raise _http_error(e) from e
    return ScheduleResponse.from_result(
        plan_id,
        outcome.result,
        persisted=outcome.persisted,
        replaced_count=outcome.replaced_count,
    )


@router.get(
    "/plans/{plan_id}/schedule/preview",
    summary="Preview plan schedule",
    description="Chain the plan's operations through the daily window without storing anything.",
    response_model=ScheduleResponse,
)
def preview_schedule(plan_id: str, service: ScheduleServiceDep) -> ScheduleResponse:
    try:
        outcome = service.preview(plan_id)
    except DomainError as e:
        raise _http_error(e) from e
    return ScheduleResponse.from_result(plan_id, outcome.result)


@router.get("/window", response_model=WindowPreferenceResponse)
def get_window(service: ScheduleServiceDep) -> WindowPreferenceResponse:
    return _window_response(service.get_window_preference())


@router.put("/window", response_model=WindowPreferenceResponse)
def update_window(
    request: WindowPreferenceRequest, service: ScheduleServiceDep
) -> WindowPreferenceResponse:
    preference = WindowPreference(start=request.start, duration_hours=request.duration_hours)
    try:
        saved = service.save_window_preference(preference)
    except DomainError as e:
        raise _http_error(e) from e
    return _window_response(saved)


def _window_response(preference: WindowPreference) -> WindowPreferenceResponse:
    window = preference.to_window()
    start = window.start_of_window(preference.start.replace(tzinfo=None))
    end: datetime = start + window.length
    return WindowPreferenceResponse(
        start=preference.start,
        duration_hours=preference.duration_hours,
        window_start=str(window.start),
        window_end=end.strftime("%H:%M"),
    )
