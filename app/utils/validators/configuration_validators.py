import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.companies.company import Company
from app.models.shared.enums import Cycle, EntityType, WeekDay
from app.utils.validators.pipeline import Step

# 24 hour HH:MM
HOURS_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_cycle(payload, context):
    """Resolve ``cycle`` and, for weekly and bi-weekly cycles, ``day``"""
    if payload.cycle_id is None:
        raise ValidationError("Cycle is required")
    try:
        cycle = Cycle(payload.cycle_id)
    except ValueError:
        raise ValidationError("Cycle is invalid")

    day = None
    if cycle.needs_start_day:
        if payload.day_start_id is None:
            raise ValidationError(f"Start day is required for a {cycle.label} cycle")
        try:
            day = WeekDay(payload.day_start_id)
        except ValueError:
            raise ValidationError("Start day is invalid")

    return context.with_values(cycle=cycle, day=day)


def require_default_hours(payload, context):
    if not payload.default_hours:
        raise ValidationError("Default hours are required")
    if not HOURS_PATTERN.match(payload.default_hours.strip()):
        raise ValidationError("Default hours must be in HH:MM format")


def require_net_pay_days(payload, context):
    if payload.net_pay_days is None:
        raise ValidationError("Net pay days are required")
    if not 0 <= payload.net_pay_days <= 365:
        raise ValidationError("Net pay days must be between 0 and 365")


def client_company(session: AsyncSession, company_id: int) -> Step:
    async def load_client_company(payload, context):
        result = await session.execute(
            select(Company).where(Company.id == company_id, Company.deleted_at.is_(None))
        )
        company = result.scalar_one_or_none()
        if not company:
            raise NotFoundError(f"Company with ID {company_id} not found")
        if company.entity_type != EntityType.CLIENT.value:
            raise ValidationError(f"Company {company.reference_id} is not a client")
        return context.with_values(company=company)

    return load_client_company
