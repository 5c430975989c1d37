from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.logging import log_request, log_response
from app.models.hr.employee import Employee
from app.schemas.common.response import ApiResponse
from app.schemas.companies.client_configuration_schema import (
    ClientTimesheetConfigurationCreate,
    ClientTimesheetConfigurationResponse,
    ClientTimesheetConfigurationUpdate,
)
from app.services.companies.client_timesheet_service import ClientTimesheetService

router = APIRouter()

@router.get("/{company_id}/timesheet-configuration", response_model=ApiResponse[ClientTimesheetConfigurationResponse])
async def get_timesheet_configuration(
    company_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get client timesheet configuration"""
    service = ClientTimesheetService(session)
    data = await service.get_timesheet_configuration(company_id)
    return ApiResponse(message="Success", data=data)

@router.post("/{company_id}/timesheet-configuration", response_model=ApiResponse[ClientTimesheetConfigurationResponse])
async def create_timesheet_configuration(
    company_id: int,
    payload: ClientTimesheetConfigurationCreate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Create client timesheet configuration"""
    log_request(request, "Store client timesheet configuration request")
    service = ClientTimesheetService(session)
    data = await service.create_timesheet_configuration(company_id, payload, current_user.id)
    response = ApiResponse(message="Added successfully", data=data)
    log_response(request, response.model_dump(), "Store client timesheet configuration response")
    return response

@router.put("/{company_id}/timesheet-configuration", response_model=ApiResponse[ClientTimesheetConfigurationResponse])
async def update_timesheet_configuration(
    company_id: int,
    payload: ClientTimesheetConfigurationUpdate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Update client timesheet configuration"""
    log_request(request, "Update client timesheet configuration request")
    service = ClientTimesheetService(session)
    data = await service.update_timesheet_configuration(company_id, payload, current_user.id)
    response = ApiResponse(message="Updated successfully", data=data)
    log_response(request, response.model_dump(), "Update client timesheet configuration response")
    return response
