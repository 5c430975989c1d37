from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.exceptions import NotFoundError
from app.core.logging import log_request, log_response, log_user_action
from app.models.hr.employee import Employee
from app.schemas.common.response import ApiResponse
from app.schemas.hr.employee_schema import (
    EmployeeDeactivateRequest, EmployeeRejoinRequest, EmployeeResponse
)
from app.services.hr.employee_service import EmployeeService

router = APIRouter()

@router.get("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def get_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get employee by ID"""
    service = EmployeeService(session)
    employee = await service.get_employee(employee_id)
    if not employee:
        raise NotFoundError(f"Employee with ID {employee_id} not found")
    return ApiResponse(message="Success", data=EmployeeResponse.model_validate(employee))

@router.put("/{employee_id}/deactivate", response_model=ApiResponse[EmployeeResponse])
async def deactivate_employee(
    employee_id: int,
    payload: EmployeeDeactivateRequest,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Relieve an employee"""
    log_request(request, "Update employee deactivate request")
    service = EmployeeService(session)
    employee = await service.deactivate_employee(employee_id, payload, current_user.id)
    log_user_action(current_user.id, "deactivate", "employee", employee_id)
    response = ApiResponse(message="Updated successfully", data=EmployeeResponse.model_validate(employee))
    log_response(request, response.model_dump(), "Update employee deactivate response")
    return response

@router.put("/{employee_id}/rejoin", response_model=ApiResponse[EmployeeResponse])
async def rejoin_employee(
    employee_id: int,
    payload: EmployeeRejoinRequest,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Rejoin a relieved employee"""
    log_request(request, "Update employee rejoin request")
    service = EmployeeService(session)
    employee = await service.rejoin_employee(employee_id, payload, current_user.id)
    log_user_action(current_user.id, "rejoin", "employee", employee_id)
    response = ApiResponse(message="Updated successfully", data=EmployeeResponse.model_validate(employee))
    log_response(request, response.model_dump(), "Update employee rejoin response")
    return response
