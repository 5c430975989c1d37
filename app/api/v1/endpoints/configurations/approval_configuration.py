from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.logging import log_request, log_response
from app.models.hr.employee import Employee
from app.models.shared.enums import ApprovalModule
from app.schemas.approval.approval_configuration_schema import (
    ApprovalConfigurationCreate,
    ApprovalConfigurationResponse,
    ApprovalConfigurationUpdate,
)
from app.schemas.common.response import ApiResponse
from app.services.approval.global_approval_service import GlobalApprovalService

router = APIRouter()

@router.get("/approval", response_model=ApiResponse[List[ApprovalConfigurationResponse]])
async def get_global_approval_configurations(
    approval_module: ApprovalModule = Query(...),
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get the global approval configuration of a module"""
    service = GlobalApprovalService(session)
    data = await service.get_global_configurations(approval_module)
    return ApiResponse(message="Success", data=data)

@router.post("/approval", response_model=ApiResponse[ApprovalConfigurationResponse])
async def create_global_approval_configuration(
    payload: ApprovalConfigurationCreate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Create the global approval configuration of a module"""
    log_request(request, "Store approval configuration request")
    service = GlobalApprovalService(session)
    data = await service.create_global_configuration(payload, current_user.id)
    response = ApiResponse(message="Added successfully", data=data)
    log_response(request, response.model_dump(), "Store approval configuration response")
    return response

@router.put("/approval/{setting_id}", response_model=ApiResponse[ApprovalConfigurationResponse])
async def update_global_approval_configuration(
    setting_id: int,
    payload: ApprovalConfigurationUpdate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Update a global approval configuration"""
    log_request(request, "Update approval configuration request")
    service = GlobalApprovalService(session)
    data = await service.update_global_configuration(setting_id, payload, current_user.id)
    response = ApiResponse(message="Updated successfully", data=data)
    log_response(request, response.model_dump(), "Update approval configuration response")
    return response
