from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.logging import log_request, log_response
from app.models.hr.employee import Employee
from app.schemas.common.response import ApiResponse
from app.schemas.placement.placement_invoice_schema import (
    PlacementInvoiceConfigurationCreate,
    PlacementInvoiceConfigurationResponse,
    PlacementInvoiceConfigurationUpdate,
)
from app.services.placement.placement_invoice_service import PlacementInvoiceService

router = APIRouter()

@router.get("/{placement_id}/invoice-configuration", response_model=ApiResponse[PlacementInvoiceConfigurationResponse])
async def get_invoice_configuration(
    placement_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get placement invoice configuration"""
    service = PlacementInvoiceService(session)
    data = await service.get_invoice_configuration(placement_id)
    return ApiResponse(message="Success", data=data)

@router.post("/{placement_id}/invoice-configuration", response_model=ApiResponse[PlacementInvoiceConfigurationResponse])
async def create_invoice_configuration(
    placement_id: int,
    payload: PlacementInvoiceConfigurationCreate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    log_request(request, "Store placement invoice configuration request")
    service = PlacementInvoiceService(session)
    data = await service.create_invoice_configuration(placement_id, payload, current_user.id)
    response = ApiResponse(message="Added successfully", data=data)
    log_response(request, response.model_dump(), "Store placement invoice configuration response")
    return response

@router.put("/{placement_id}/invoice-configuration", response_model=ApiResponse[PlacementInvoiceConfigurationResponse])
async def update_invoice_configuration(
    placement_id: int,
    payload: PlacementInvoiceConfigurationUpdate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    log_request(request, "Update placement invoice configuration request")
    service = PlacementInvoiceService(session)
    data = await service.update_invoice_configuration(placement_id, payload, current_user.id)
    response = ApiResponse(message="Updated successfully", data=data)
    log_response(request, response.model_dump(), "Update placement invoice configuration response")
    return response
