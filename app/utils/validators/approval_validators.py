from collections import defaultdict
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.approval.approval_level import ApprovalLevel
from app.models.approval.approval_user import ApprovalUser
from app.models.hr.employee import Employee
from app.models.shared.enums import EmployeeStatus
from app.services.approval.rank_order import APPROVAL_REQUIRED, ensure_rank_order, normalize_rank
from app.utils.validators.pipeline import Step


def _is_new_level(approval, existing: bool) -> bool:
    return not existing or approval.id is None


def _new_approver_ids(approval, existing: bool) -> List[int]:
    """Employee ids to be added as approvers on this level"""
    return [
        a.employee_id for a in approval.approver_ids
        if a.employee_id is not None and (not existing or a.id is None)
    ]


def require_approvals(payload, context):
    if not payload.approvals:
        raise ValidationError(APPROVAL_REQUIRED)


def require_numeric_ranks(payload, context):
    for approval in payload.approvals:
        if approval.rank is None or str(approval.rank).strip() == "":
            raise ValidationError("Rank is required for every approval level")
        if normalize_rank(approval.rank) is None:
            raise ValidationError(f"Rank '{approval.rank}' is not a number")


def approver_presence(existing: bool) -> Step:
    def require_level_approvers(payload, context):
        for approval in payload.approvals:
            employee_ids = _new_approver_ids(approval, existing)
            if len(employee_ids) != len(set(employee_ids)):
                raise ValidationError(f"Approver is repeated on approval level {approval.rank}")
            if _is_new_level(approval, existing) and not employee_ids:
                raise ValidationError(f"Approval level {approval.rank} requires at least one approver")

    return require_level_approvers


def active_approvers(session: AsyncSession, existing: bool) -> Step:
    async def require_active_approvers(payload, context):
        employee_ids = {
            employee_id
            for approval in payload.approvals
            for employee_id in _new_approver_ids(approval, existing)
        }
        if not employee_ids:
            return

        result = await session.execute(
            select(Employee.id).where(
                Employee.id.in_(employee_ids),
                Employee.status == EmployeeStatus.ACTIVE.value,
                Employee.deleted_at.is_(None)
            )
        )
        missing = sorted(employee_ids - set(result.scalars().all()))
        if missing:
            raise ValidationError(f"Approver {missing[0]} is not an active employee")

    return require_active_approvers


def existing_chain(session: AsyncSession) -> Step:
    """
    Check an update against the stored chain of ``context['approval_setting_id']``.

    Adds ``final_levels`` to the context: the levels the chain will hold once
    the update is applied, each as ``{"id", "rank"}``.
    """
    async def check_existing_chain(payload, context):
        setting_id = context["approval_setting_id"]

        result = await session.execute(
            select(ApprovalLevel).where(
                ApprovalLevel.approval_setting_id == setting_id,
                ApprovalLevel.deleted_at.is_(None)
            ).order_by(ApprovalLevel.level)
        )
        levels = result.scalars().all()
        level_ids = {level.id for level in levels}

        users = []
        if level_ids:
            result = await session.execute(
                select(ApprovalUser).where(
                    ApprovalUser.approval_level_id.in_(level_ids),
                    ApprovalUser.deleted_at.is_(None)
                )
            )
            users = result.scalars().all()

        user_level = {u.id: u.approval_level_id for u in users}
        users_by_level = defaultdict(dict)
        for u in users:
            users_by_level[u.approval_level_id][u.id] = u.approver_id

        deleted_levels = set(payload.delete_approval_level_ids)
        for level_id in deleted_levels:
            if level_id not in level_ids:
                raise ValidationError(f"Approval level {level_id} does not belong to this configuration")

        deleted_users = set(payload.delete_user_ids)
        for user_id in deleted_users:
            if user_id not in user_level:
                raise ValidationError(f"Approval user {user_id} does not belong to this configuration")

        requested = {}
        for approval in payload.approvals:
            if approval.id is None:
                continue
            if approval.id not in level_ids:
                raise ValidationError(f"Approval level {approval.id} does not belong to this configuration")
            if approval.id in requested:
                raise ValidationError(f"Approval level {approval.id} is repeated")
            if approval.id in deleted_levels:
                raise ValidationError(f"Approval level {approval.id} cannot be updated and deleted together")
            for approver in approval.approver_ids:
                if approver.id is not None and user_level.get(approver.id) != approval.id:
                    raise ValidationError(
                        f"Approval user {approver.id} does not belong to approval level {approval.id}"
                    )
            requested[approval.id] = approval

        final_levels = []
        for level in levels:
            if level.id in deleted_levels:
                continue
            approval = requested.get(level.id)
            rank = approval.rank if approval else level.level
            remaining = {
                employee_id for user_id, employee_id in users_by_level[level.id].items()
                if user_id not in deleted_users
            }
            added = set(_new_approver_ids(approval, existing=True)) if approval else set()
            repeated = sorted(remaining & added)
            if repeated:
                raise ValidationError(f"Employee {repeated[0]} is already an approver on approval level {rank}")
            if not remaining and not added:
                raise ValidationError(f"Approval level {rank} must keep at least one approver")
            final_levels.append({"id": level.id, "rank": rank})

        final_levels.extend(
            {"id": None, "rank": approval.rank}
            for approval in payload.approvals if approval.id is None
        )
        if not final_levels:
            raise ValidationError(APPROVAL_REQUIRED)

        return context.with_values(final_levels=final_levels)

    return check_existing_chain


def rank_order(payload, context):
    ensure_rank_order(context.get("final_levels", payload.approvals))


def approval_steps(session: AsyncSession, existing: bool = False) -> List[Step]:
    """Steps validating an approval chain for a new setting, or for an update of
    the setting named by ``context['approval_setting_id']`` when ``existing``"""
    steps = [
        require_approvals,
        require_numeric_ranks,
        approver_presence(existing),
        active_approvers(session, existing),
    ]
    if existing:
        steps.append(existing_chain(session))
    steps.append(rank_order)
    return steps
