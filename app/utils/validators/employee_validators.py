from datetime import date

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from app.models.hr.employee import Employee
from app.models.placement.placement import Placement
from app.models.shared.enums import EmployeeStatus
from app.services.approval.sole_approver_guard import SoleApproverGuard
from app.utils.validators.pipeline import Step


def employee_exists(session: AsyncSession, employee_id: int) -> Step:
    async def load_employee(payload, context):
        result = await session.execute(
            select(Employee).where(Employee.id == employee_id, Employee.deleted_at.is_(None))
        )
        employee = result.scalar_one_or_none()
        if not employee:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        return context.with_values(employee=employee)

    return load_employee


def not_tenant_owner(payload, context):
    if context["employee"].is_tenant_owner:
        raise BusinessRuleViolation("Action not allowed")


def approver_release(session: AsyncSession) -> Step:
    """Sole approver check; the memberships to release go to the context"""
    async def check_sole_approver(payload, context):
        memberships = await SoleApproverGuard(session).check(context["employee"])
        return context.with_values(approver_memberships=memberships)

    return check_sole_approver


def placements_belong_to_employee(session: AsyncSession) -> Step:
    async def check_placements(payload, context):
        employee = context["employee"]
        requested = [p.placement_id for p in payload.placements]
        if len(requested) != len(set(requested)):
            raise ValidationError("Placement is repeated")

        placements = {}
        if requested:
            result = await session.execute(
                select(Placement).where(Placement.id.in_(requested), Placement.deleted_at.is_(None))
            )
            placements = {p.id: p for p in result.scalars().all()}

        for item in payload.placements:
            placement = placements.get(item.placement_id)
            if not placement or placement.employee_id != employee.id:
                raise ValidationError(f"Placement {item.placement_id} does not belong to this employee")
            if item.end_date < placement.start_date:
                raise ValidationError(f"End date of placement {placement.reference_id} cannot be before its start date")

        return context.with_values(placements=placements)

    return check_placements


def relieving_after_placements(session: AsyncSession) -> Step:
    """
    When the request closes every active placement, the relieving date cannot
    precede the latest end date; those placements are then closed.
    """
    async def check_relieving_date(payload, context):
        employee = context["employee"]
        result = await session.execute(
            select(Placement.id).where(
                Placement.employee_id == employee.id,
                Placement.deleted_at.is_(None),
                or_(Placement.end_date.is_(None), Placement.end_date >= date.today())
            )
        )
        active_ids = set(result.scalars().all())
        requested = {p.placement_id for p in payload.placements}

        if not requested or not active_ids or not active_ids <= requested:
            return context.with_values(close_placements=False)

        latest_end_date = max(p.end_date for p in payload.placements)
        if payload.relieving_date < latest_end_date:
            raise ValidationError(
                f"Relieving date cannot be before the last placement end date {latest_end_date.isoformat()}"
            )
        return context.with_values(close_placements=True)

    return check_relieving_date


def inactive_employee(payload, context):
    if context["employee"].status != EmployeeStatus.INACTIVE.value:
        raise ValidationError("Only an inactive employee can rejoin")


def rejoin_after_relieving(payload, context):
    relieving_date = context["employee"].relieving_date
    if relieving_date and payload.rejoin_date < relieving_date:
        raise ValidationError(f"Rejoin date cannot be before the relieving date {relieving_date.isoformat()}")
