import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import and_, case, distinct, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.config import settings
from app.core.exceptions import BusinessRuleViolation
from app.models.approval.approval_level import ApprovalLevel
from app.models.approval.approval_settings import ApprovalSetting
from app.models.approval.approval_user import ApprovalUser
from app.models.companies.company import Company
from app.models.hr.employee import Employee
from app.models.placement.placement import Placement
from app.schemas.approval.approver_check_schema import ApproverCheckResult, ApproverMembership

logger = logging.getLogger(__name__)

SOLE_APPROVER_MESSAGE = "Employee is the only approver for "
GLOBAL_REFERENCE = "the global approval configuration"


def evaluate(memberships: Sequence[ApproverMembership]) -> ApproverCheckResult:
    """Blocked when the employee is the only active approver on any level"""
    blocked = False
    references: List[str] = []
    for membership in memberships:
        if membership.num_approval_users == 1 and membership.is_approver:
            blocked = True
            for ref in membership.references:
                if ref not in references:
                    references.append(ref)
    return ApproverCheckResult(blocked=blocked, blocking_references=references)


def blocking_message(result: ApproverCheckResult) -> str:
    return SOLE_APPROVER_MESSAGE + (", ".join(result.blocking_references) or GLOBAL_REFERENCE)


class SoleApproverGuard:
    """
    Stops an employee from leaving while they are the only approver of an
    approval level, and removes them from every approval level otherwise.

    Runs inside the caller's transaction; nothing here commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_approver_memberships(self, employee_id: int) -> List[ApproverMembership]:
        au = aliased(ApprovalUser)
        ct = aliased(Company)
        ci = aliased(Company)
        plt = aliased(Placement)
        pli = aliased(Placement)

        num_approval_users = (
            select(
                ApprovalUser.approval_level_id,
                func.count(distinct(ApprovalUser.approver_id)).label("count")
            )
            .where(ApprovalUser.deleted_at.is_(None))
            .group_by(ApprovalUser.approval_level_id)
            .subquery("num_approval_users")
        )

        setting_id = ApprovalLevel.approval_setting_id
        stmt = (
            select(
                ApprovalLevel.id.label("approval_level_id"),
                setting_id.label("approval_setting_id"),
                ApprovalLevel.level,
                au.id.label("approval_user_id"),
                au.approver_id,
                case((au.approver_id == employee_id, True), else_=False).label("is_approver"),
                func.coalesce(num_approval_users.c.count, 0).label("num_approval_users"),
                ct.reference_id.label("client_timesheet"),
                ci.reference_id.label("client_invoice"),
                plt.reference_id.label("placement_timesheet"),
                pli.reference_id.label("placement_invoice"),
            )
            .select_from(ApprovalLevel)
            .join(au, and_(
                au.approval_level_id == ApprovalLevel.id,
                au.approver_id == employee_id,
                au.deleted_at.is_(None)
            ))
            .join(ApprovalSetting, and_(
                ApprovalSetting.id == setting_id,
                ApprovalSetting.deleted_at.is_(None)
            ))
            .outerjoin(num_approval_users, num_approval_users.c.approval_level_id == ApprovalLevel.id)
            .outerjoin(ct, and_(ct.timesheet_approval_id == setting_id, ct.deleted_at.is_(None)))
            .outerjoin(ci, and_(ci.invoice_approval_id == setting_id, ci.deleted_at.is_(None)))
            .outerjoin(plt, and_(plt.timesheet_approval_id == setting_id, plt.deleted_at.is_(None)))
            .outerjoin(pli, and_(pli.invoice_approval_id == setting_id, pli.deleted_at.is_(None)))
            .where(ApprovalLevel.deleted_at.is_(None))
            .order_by(setting_id, ApprovalLevel.level, au.id)
        )

        result = await self.session.execute(stmt)
        memberships = [ApproverMembership(**row._mapping) for row in result.all()]
        return [m for m in memberships if m.is_approver]

    async def lock_levels(self, employee_id: int) -> None:
        """Row-lock the levels the employee approves on (no-op on SQLite)"""
        await self.session.execute(
            select(ApprovalLevel.id)
            .where(
                ApprovalLevel.id.in_(
                    select(ApprovalUser.approval_level_id).where(
                        ApprovalUser.approver_id == employee_id,
                        ApprovalUser.deleted_at.is_(None)
                    )
                ),
                ApprovalLevel.deleted_at.is_(None)
            )
            .order_by(ApprovalLevel.id)
            .with_for_update()
        )

    async def check(self, employee: Employee) -> List[ApproverMembership]:
        """Raise when blocked; return the memberships to release otherwise"""
        if employee.employment_type_id != settings.INTERNAL_EMPLOYMENT_TYPE_ID:
            return []

        await self.lock_levels(employee.id)
        memberships = await self.find_approver_memberships(employee.id)
        result = evaluate(memberships)
        if result.blocked:
            logger.warning(
                f"⛔ Employee {employee.id} is the sole approver for {result.blocking_references or 'a global level'}"
            )
            raise BusinessRuleViolation(blocking_message(result))
        return memberships

    async def release(self, memberships: Sequence[ApproverMembership], user_id: Optional[int] = None) -> int:
        """Soft-delete the approval user rows behind ``memberships``"""
        user_ids = list(dict.fromkeys(m.approval_user_id for m in memberships))
        if not user_ids:
            return 0

        await self.session.execute(
            update(ApprovalUser)
            .where(ApprovalUser.id.in_(user_ids), ApprovalUser.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc), updated_by=user_id)
        )
        logger.info(f"Released {len(user_ids)} approval user(s)")
        return len(user_ids)

    async def check_and_release(self, employee: Employee, user_id: Optional[int] = None) -> List[ApproverMembership]:
        memberships = await self.check(employee)
        await self.release(memberships, user_id)
        return memberships
