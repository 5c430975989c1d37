import os
import sys
import asyncio

# Add project root to Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
sys.path.insert(0, project_root)

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.approval.approval_settings import ApprovalSetting
from app.models.configuration.invoice_configuration import InvoiceConfiguration
from app.models.configuration.timesheet_configuration import TimesheetConfiguration
from app.models.hr.employee import Employee
from app.models.shared.enums import ApprovalModule, Cycle, EmploymentType, WeekDay
from app.schemas.approval.approval_configuration_schema import ApprovalLevelIn, ApproverIn
from app.services.approval.approval_configuration_service import ApprovalConfigurationService

logger = logging.getLogger(__name__)

async def create_initial_data(session: AsyncSession):
    """Create initial data for the application"""
    try:
        logger.info("📋 Creating initial data...")

        owner = await create_tenant_owner(session)
        await create_global_timesheet_configuration(session)
        await create_global_invoice_configuration(session)
        for module in ApprovalModule:
            await create_global_approval(session, module, owner)

        await session.commit()
        logger.info("✅ Initial data created successfully")
        return True

    except Exception as e:
        logger.error(f"❌ Error creating initial data: {str(e)}")
        await session.rollback()
        raise

async def create_tenant_owner(session: AsyncSession) -> Employee:
    """Create the tenant owner, first approver of the global chains"""
    result = await session.execute(
        select(Employee).where(Employee.is_tenant_owner.is_(True))
    )
    owner = result.scalars().first()

    if not owner:
        owner = Employee(
            reference_id="EMP-0001",
            first_name="Tenant",
            last_name="Owner",
            display_name="Tenant Owner",
            email_id=os.getenv("TENANT_OWNER_EMAIL", "owner@example.com"),
            employment_type_id=EmploymentType.INTERNAL.value,
            is_tenant_owner=True
        )
        session.add(owner)
        await session.flush()
        logger.info("✅ Tenant owner created")
    return owner

async def create_global_timesheet_configuration(session: AsyncSession):
    result = await session.execute(
        select(TimesheetConfiguration).where(
            TimesheetConfiguration.is_global.is_(True),
            TimesheetConfiguration.deleted_at.is_(None)
        )
    )
    if not result.scalars().first():
        session.add(TimesheetConfiguration(
            cycle_id=Cycle.WEEKLY.value,
            day_start_id=WeekDay.MONDAY.value,
            default_hours="08:00",
            ts_mandatory=False,
            is_global=True
        ))
        logger.info("✅ Global timesheet configuration created")

async def create_global_invoice_configuration(session: AsyncSession):
    result = await session.execute(
        select(InvoiceConfiguration).where(
            InvoiceConfiguration.is_global.is_(True),
            InvoiceConfiguration.deleted_at.is_(None)
        )
    )
    if not result.scalars().first():
        session.add(InvoiceConfiguration(
            cycle_id=Cycle.MONTHLY.value,
            net_pay_days=30,
            is_global=True
        ))
        logger.info("✅ Global invoice configuration created")

async def create_global_approval(session: AsyncSession, module: ApprovalModule, owner: Employee):
    service = ApprovalConfigurationService(session)
    if await service.find_global_setting(module):
        return
    await service.store(
        module,
        True,
        [ApprovalLevelIn(rank=1, approver_ids=[ApproverIn(employee_id=owner.id)])],
        owner.id
    )
    logger.info(f"✅ Global approval configuration created for module {module.name.lower()}")

if __name__ == "__main__":
    from app.core.database import async_session_maker

    async def main():
        async with async_session_maker() as session:
            await create_initial_data(session)

    asyncio.run(main())
