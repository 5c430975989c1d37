import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InternalServerError, NotFoundError
from app.models.hr.employee import Employee
from app.models.shared.enums import EmployeeStatus
from app.schemas.hr.employee_schema import EmployeeDeactivateRequest, EmployeeRejoinRequest
from app.services.approval.sole_approver_guard import SoleApproverGuard
from app.utils.validators.employee_validators import (
    approver_release, employee_exists, inactive_employee, not_tenant_owner,
    placements_belong_to_employee, rejoin_after_relieving, relieving_after_placements
)
from app.utils.validators.pipeline import ValidationPipeline

logger = logging.getLogger(__name__)

class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        result = await self.session.execute(
            select(Employee).where(Employee.id == employee_id, Employee.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def deactivate_employee(
        self,
        employee_id: int,
        data: EmployeeDeactivateRequest,
        user_id: int
    ) -> Employee:
        """
        Relieve an employee.

        The sole approver check, the release of their approver seats, the
        placement end dates and the status change are committed together.
        """
        try:
            pipeline = ValidationPipeline([
                employee_exists(self.session, employee_id),
                not_tenant_owner,
                approver_release(self.session),
                placements_belong_to_employee(self.session),
                relieving_after_placements(self.session),
            ])
            context = await pipeline.run(data)
            employee = context["employee"]

            if context["close_placements"]:
                placements = context["placements"]
                for item in data.placements:
                    placement = placements[item.placement_id]
                    placement.end_date = item.end_date
                    placement.updated_by = user_id

            released = await SoleApproverGuard(self.session).release(context["approver_memberships"], user_id)

            if data.relieving_date <= date.today():
                employee.status = EmployeeStatus.INACTIVE.value
            employee.relieving_date = data.relieving_date
            employee.access_token = None
            employee.refresh_token = None
            employee.fcm_token = None
            employee.updated_by = user_id

            await self.session.commit()

            logger.info(
                f"Employee {employee.reference_id} relieved on {data.relieving_date} by user {user_id}, "
                f"{released} approver seat(s) released"
            )
            return employee

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deactivating employee {employee_id}: {str(e)}")
            raise InternalServerError("Failed to deactivate employee", error=str(e))

    async def rejoin_employee(
        self,
        employee_id: int,
        data: EmployeeRejoinRequest,
        user_id: int
    ) -> Employee:
        try:
            pipeline = ValidationPipeline([
                employee_exists(self.session, employee_id),
                inactive_employee,
                rejoin_after_relieving,
            ])
            context = await pipeline.run(data)
            employee = context["employee"]

            employee.status = EmployeeStatus.ACTIVE.value
            employee.rejoin_date = data.rejoin_date
            employee.relieving_date = None
            employee.enable_login = data.enable_login
            employee.updated_by = user_id

            await self.session.commit()

            logger.info(f"Employee {employee.reference_id} rejoined on {data.rejoin_date} by user {user_id}")
            return employee

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error rejoining employee {employee_id}: {str(e)}")
            raise InternalServerError("Failed to rejoin employee", error=str(e))
