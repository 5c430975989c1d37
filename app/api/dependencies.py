from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.auth.jwt_handler import decode_access_token
from app.models.hr.employee import Employee
from app.models.shared.enums import EmployeeStatus
from app.services.hr.employee_service import EmployeeService
import logging

security = HTTPBearer()
logger = logging.getLogger(__name__)

def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_async_session)
) -> Employee:
    """Get current authenticated employee"""
    token = credentials.credentials

    # Decode token
    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized()

    # Get employee ID from token
    try:
        employee_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized()

    # Get employee from database
    employee = await EmployeeService(session).get_employee(employee_id)

    if employee is None or employee.status != EmployeeStatus.ACTIVE.value:
        raise _unauthorized("User not found or inactive")

    # Tokens are cleared when an employee is relieved
    if employee.access_token != token:
        logger.info(f"Rejected stale token for employee {employee_id}")
        raise _unauthorized("Session expired")

    # Add request info to context
    request.state.current_user = employee

    return employee
