import pytest
from datetime import datetime, timezone
from sqlalchemy import select

from app.core.exceptions import BusinessRuleViolation
from app.models import ApprovalLevel, ApprovalUser
from app.models.shared.enums import ApprovalModule, EmploymentType
from app.services.approval.sole_approver_guard import SOLE_APPROVER_MESSAGE, SoleApproverGuard


async def active_users(session_maker, approver_id):
    async with session_maker() as s:
        result = await s.execute(
            select(ApprovalUser).where(
                ApprovalUser.approver_id == approver_id,
                ApprovalUser.deleted_at.is_(None)
            )
        )
        return result.scalars().all()


async def test_sole_approver_of_client_timesheet_is_blocked(session, make_employee, make_company, make_approval_setting):
    approver = await make_employee()
    setting = await make_approval_setting([[approver]])
    client = await make_company(timesheet_approval_id=setting.id)

    with pytest.raises(BusinessRuleViolation) as exc_info:
        await SoleApproverGuard(session).check(approver)

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == SOLE_APPROVER_MESSAGE + client.reference_id


async def test_one_of_two_approvers_is_released(session, session_maker, make_employee, make_company, make_approval_setting):
    approver, other = await make_employee(), await make_employee()
    setting = await make_approval_setting([[approver, other]])
    await make_company(timesheet_approval_id=setting.id)

    memberships = await SoleApproverGuard(session).check_and_release(approver)
    await session.commit()

    assert len(memberships) == 1
    assert memberships[0].num_approval_users == 2
    assert await active_users(session_maker, approver.id) == []

    remaining = await active_users(session_maker, other.id)
    assert len(remaining) == 1
    assert remaining[0].approval_level_id == memberships[0].approval_level_id

    async with session_maker() as s:
        level = await s.get(ApprovalLevel, memberships[0].approval_level_id)
        assert level.deleted_at is None


async def test_employee_without_memberships_is_not_blocked(session, make_employee):
    employee = await make_employee()
    assert await SoleApproverGuard(session).check_and_release(employee) == []


async def test_external_employee_is_not_checked(session, session_maker, make_employee, make_company, make_approval_setting):
    consultant = await make_employee(employment_type_id=EmploymentType.CONSULTANT.value)
    setting = await make_approval_setting([[consultant]])
    await make_company(timesheet_approval_id=setting.id)

    assert await SoleApproverGuard(session).check_and_release(consultant) == []
    assert len(await active_users(session_maker, consultant.id)) == 1


async def test_references_cover_every_owner(
    session, make_employee, make_company, make_placement, make_approval_setting
):
    approver, other = await make_employee(), await make_employee()
    timesheet = await make_approval_setting([[approver]])
    invoice = await make_approval_setting([[other], [approver]], approval_module=ApprovalModule.INVOICE)
    client = await make_company(timesheet_approval_id=timesheet.id, invoice_approval_id=invoice.id)
    placement = await make_placement(other, client, timesheet_approval_id=timesheet.id)

    with pytest.raises(BusinessRuleViolation) as exc_info:
        await SoleApproverGuard(session).check(approver)

    # one reference per owner, in query order
    detail = exc_info.value.detail
    references = detail[len(SOLE_APPROVER_MESSAGE):].split(", ")
    assert references == [client.reference_id, placement.reference_id]


async def test_shared_setting_is_released_once(
    session, make_employee, make_company, make_placement, make_approval_setting
):
    approver, other = await make_employee(), await make_employee()
    setting = await make_approval_setting([[approver, other]])
    client = await make_company(timesheet_approval_id=setting.id)
    await make_placement(other, client, timesheet_approval_id=setting.id)
    await make_placement(other, client, timesheet_approval_id=setting.id)

    guard = SoleApproverGuard(session)
    memberships = await guard.check(approver)

    # one row per owner combination, one approver seat
    assert len(memberships) == 2
    assert await guard.release(memberships) == 1


async def test_deleted_level_is_ignored(session, make_employee, make_company, make_approval_setting):
    approver = await make_employee()
    setting = await make_approval_setting([[approver]])
    await make_company(timesheet_approval_id=setting.id)

    result = await session.execute(select(ApprovalLevel).where(ApprovalLevel.approval_setting_id == setting.id))
    level = result.scalar_one()
    level.deleted_at = datetime.now(timezone.utc)
    await session.commit()

    assert await SoleApproverGuard(session).find_approver_memberships(approver.id) == []


async def test_sole_approver_of_global_chain_is_blocked(session, make_employee, make_approval_setting):
    approver = await make_employee()
    await make_approval_setting([[approver]], is_global=True)

    with pytest.raises(BusinessRuleViolation) as exc_info:
        await SoleApproverGuard(session).check(approver)
    assert "global approval configuration" in exc_info.value.detail


async def test_duplicate_rows_count_as_one_approver(session, session_maker, make_employee, make_company, make_approval_setting):
    approver = await make_employee()
    setting = await make_approval_setting([[approver]])
    client = await make_company(timesheet_approval_id=setting.id)
    level_id = (await active_users(session_maker, approver.id))[0].approval_level_id
    session.add(ApprovalUser(approval_level_id=level_id, approver_id=approver.id))
    await session.commit()

    with pytest.raises(BusinessRuleViolation) as exc_info:
        await SoleApproverGuard(session).check(approver)

    assert exc_info.value.detail == SOLE_APPROVER_MESSAGE + client.reference_id
