from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_user
from app.core.database import get_async_session
from app.core.logging import log_request, log_response
from app.models.hr.employee import Employee
from app.schemas.common.response import ApiResponse
from app.schemas.companies.client_configuration_schema import (
    ClientInvoiceConfigurationCreate,
    ClientInvoiceConfigurationResponse,
    ClientInvoiceConfigurationUpdate,
)
from app.services.companies.client_invoice_service import ClientInvoiceService

router = APIRouter()

@router.get("/{company_id}/invoice-configuration", response_model=ApiResponse[ClientInvoiceConfigurationResponse])
async def get_invoice_configuration(
    company_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Get client invoice configuration"""
    service = ClientInvoiceService(session)
    data = await service.get_invoice_configuration(company_id)
    return ApiResponse(message="Success", data=data)

@router.post("/{company_id}/invoice-configuration", response_model=ApiResponse[ClientInvoiceConfigurationResponse])
async def create_invoice_configuration(
    company_id: int,
    payload: ClientInvoiceConfigurationCreate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Create client invoice configuration"""
    log_request(request, "Store client invoice configuration request")
    service = ClientInvoiceService(session)
    data = await service.create_invoice_configuration(company_id, payload, current_user.id)
    response = ApiResponse(message="Added successfully", data=data)
    log_response(request, response.model_dump(), "Store client invoice configuration response")
    return response

@router.put("/{company_id}/invoice-configuration", response_model=ApiResponse[ClientInvoiceConfigurationResponse])
async def update_invoice_configuration(
    company_id: int,
    payload: ClientInvoiceConfigurationUpdate,
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    current_user: Employee = Depends(get_current_user)
):
    """Update client invoice configuration"""
    log_request(request, "Update client invoice configuration request")
    service = ClientInvoiceService(session)
    data = await service.update_invoice_configuration(company_id, payload, current_user.id)
    response = ApiResponse(message="Updated successfully", data=data)
    log_response(request, response.model_dump(), "Update client invoice configuration response")
    return response
