from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.logging import log_request, log_response
from app.models.hr.employee import Employee
from app.schemas.common.response import ApiResponse
from app.schemas.placement.placement_timesheet_schema import (
    PlacementTimesheetConfigurationCreate,
    PlacementTimesheetConfigurationResponse,
    PlacementTimesheetConfigurationUpdate,
)
from app.services.placement.placement_timesheet_service import PlacementTimesheetService

router = APIRouter()

@router.get("/{placement_id}/timesheet-configuration", response_model=ApiResponse[PlacementTimesheetConfigurationResponse])
async def get_timesheet_configuration(
    placement_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get placement timesheet configuration"""
    service = PlacementTimesheetService(session)
    data = await service.get_timesheet_configuration(placement_id)
    return ApiResponse(message="Success", data=data)

@router.post("/{placement_id}/timesheet-configuration", response_model=ApiResponse[PlacementTimesheetConfigurationResponse])
async def create_timesheet_configuration(
    placement_id: int,
    payload: PlacementTimesheetConfigurationCreate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Create placement timesheet configuration"""
    log_request(request, "Store placement timesheet configuration request")
    service = PlacementTimesheetService(session)
    data = await service.create_timesheet_configuration(placement_id, payload, current_user.id)
    response = ApiResponse(message="Added successfully", data=data)
    log_response(request, response.model_dump(), "Store placement timesheet configuration response")
    return response

@router.put("/{placement_id}/timesheet-configuration", response_model=ApiResponse[PlacementTimesheetConfigurationResponse])
async def update_timesheet_configuration(
    placement_id: int,
    payload: PlacementTimesheetConfigurationUpdate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Update placement timesheet configuration"""
    log_request(request, "Update placement timesheet configuration request")
    service = PlacementTimesheetService(session)
    data = await service.update_timesheet_configuration(placement_id, payload, current_user.id)
    response = ApiResponse(message="Updated successfully", data=data)
    log_response(request, response.model_dump(), "Update placement timesheet configuration response")
    return response
