import pytest
import itertools
from datetime import date
from typing import AsyncGenerator, List, Optional
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from main import app
from app.core.database import get_async_session, Base
from app.auth.jwt_handler import create_access_token
from app.models import (
    ApprovalSetting, Company, Employee, InvoiceConfiguration, Placement, TimesheetConfiguration
)
from app.models.shared.enums import ApprovalModule, EmployeeStatus, EmploymentType, EntityType
from app.schemas.approval.approval_configuration_schema import ApprovalLevelIn, ApproverIn
from app.services.approval.approval_configuration_service import ApprovalConfigurationService

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"

_sequence = itertools.count(1)

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()

@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

@pytest.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session

@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

# region ========== Data ==========

@pytest.fixture
def make_employee(session: AsyncSession):
    async def _make(
        employment_type_id: int = EmploymentType.INTERNAL.value,
        status: str = EmployeeStatus.ACTIVE.value,
        is_tenant_owner: bool = False,
        **fields
    ) -> Employee:
        n = next(_sequence)
        values = {
            "reference_id": f"EMP-{n:04d}",
            "first_name": "Employee",
            "last_name": f"No{n}",
            "email_id": f"employee{n}@example.com",
            "employment_type_id": employment_type_id,
            "status": status,
            "is_tenant_owner": is_tenant_owner,
        }
        values.update(fields)
        employee = Employee(**values)
        session.add(employee)
        await session.commit()
        return employee

    return _make

@pytest.fixture
def make_company(session: AsyncSession):
    async def _make(entity_type: str = EntityType.CLIENT.value, **fields) -> Company:
        n = next(_sequence)
        company = Company(
            reference_id=f"CLT-{n:04d}",
            name=f"Client {n}",
            entity_type=entity_type,
            **fields
        )
        session.add(company)
        await session.commit()
        return company

    return _make

@pytest.fixture
def make_placement(session: AsyncSession):
    async def _make(employee: Employee, client: Company, start_date: date = date(2024, 1, 1), **fields) -> Placement:
        n = next(_sequence)
        placement = Placement(
            reference_id=f"PLT-{n:04d}",
            employee_id=employee.id,
            client_id=client.id,
            start_date=start_date,
            **fields
        )
        session.add(placement)
        await session.commit()
        return placement

    return _make

@pytest.fixture
def make_approval_setting(session: AsyncSession):
    """Approval chain with one level per list of approvers, ranked in order"""
    async def _make(
        levels: List[List[Employee]],
        approval_module: ApprovalModule = ApprovalModule.TIMESHEET,
        is_global: bool = False
    ) -> ApprovalSetting:
        approvals = [
            ApprovalLevelIn(rank=rank, approver_ids=[ApproverIn(employee_id=e.id) for e in approvers])
            for rank, approvers in enumerate(levels, start=1)
        ]
        setting = await ApprovalConfigurationService(session).store(approval_module, is_global, approvals)
        await session.commit()
        return setting

    return _make

@pytest.fixture
def make_timesheet_configuration(session: AsyncSession):
    async def _make(is_global: bool = False, cycle_id: int = 1, day_start_id: Optional[int] = 1) -> TimesheetConfiguration:
        configuration = TimesheetConfiguration(
            cycle_id=cycle_id,
            day_start_id=day_start_id,
            default_hours="08:00",
            is_global=is_global
        )
        session.add(configuration)
        await session.commit()
        return configuration

    return _make

@pytest.fixture
def make_invoice_configuration(session: AsyncSession):
    async def _make(is_global: bool = False, cycle_id: int = 4, day_start_id: Optional[int] = None, net_pay_days: int = 30) -> InvoiceConfiguration:
        configuration = InvoiceConfiguration(
            cycle_id=cycle_id,
            day_start_id=day_start_id,
            net_pay_days=net_pay_days,
            is_global=is_global
        )
        session.add(configuration)
        await session.commit()
        return configuration

    return _make

@pytest.fixture
async def admin(session: AsyncSession, make_employee) -> Employee:
    employee = await make_employee(first_name="Admin")
    employee.access_token = create_access_token(employee.id)
    await session.commit()
    return employee

@pytest.fixture
def auth_headers(admin: Employee) -> dict:
    """Authentication headers for the admin employee"""
    return {"Authorization": f"Bearer {admin.access_token}"}

# endregion
