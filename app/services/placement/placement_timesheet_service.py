import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    BusinessRuleViolation, InternalServerError, NotFoundError, ValidationError
)
from app.models.companies.company import Company
from app.models.configuration.timesheet_configuration import TimesheetConfiguration
from app.models.placement.placement import Placement
from app.models.shared.enums import ApprovalModule, ConfigType, Cycle, WeekDay
from app.schemas.placement.placement_timesheet_schema import (
    PlacementTimesheetConfigurationCreate, PlacementTimesheetConfigurationUpdate
)
from app.services.approval.approval_configuration_service import ApprovalConfigurationService
from app.utils.validators.approval_validators import approval_steps
from app.utils.validators.configuration_validators import require_cycle, require_default_hours
from app.utils.validators.pipeline import ValidationPipeline, when

logger = logging.getLogger(__name__)


def custom_settings(payload, context) -> bool:
    return payload.timesheet_settings_config_type == ConfigType.CUSTOM


def custom_approvals(payload, context) -> bool:
    return payload.timesheet_approval_config_type == ConfigType.CUSTOM


def keeps_custom_approvals(payload, context) -> bool:
    placement = context["placement"]
    return custom_approvals(payload, context) and \
        placement.timesheet_approval_config_type == ConfigType.CUSTOM


def becomes_custom_approvals(payload, context) -> bool:
    return custom_approvals(payload, context) and not keeps_custom_approvals(payload, context)


def bi_weekly_start_day(payload, context):
    """A bi-weekly cycle starts on the weekday of the timesheet start date"""
    if context["cycle"] == Cycle.BI_WEEKLY and \
            context["day"] != payload.timesheet_start_date.isoweekday():
        raise ValidationError(
            f"For a Bi-Weekly cycle the start day must be "
            f"{WeekDay(payload.timesheet_start_date.isoweekday()).label}"
        )


class PlacementTimesheetService:
    """
    Timesheet settings and approval chain of a placement.

    Both are either inherited (global or client, by reference) or custom,
    owned by the placement and created, updated or removed with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.approvals = ApprovalConfigurationService(session)

    async def get_timesheet_configuration(self, placement_id: int) -> Dict[str, Any]:
        result = await self.session.execute(
            select(Placement, TimesheetConfiguration)
            .join(TimesheetConfiguration, TimesheetConfiguration.id == Placement.timesheet_configuration_id)
            .where(Placement.id == placement_id, Placement.deleted_at.is_(None))
        )
        row = result.first()
        if not row or row[0].timesheet_approval_id is None:
            raise NotFoundError(f"Timesheet configuration not found for placement {placement_id}")

        placement, configuration = row
        index = await self.approvals.index(placement.timesheet_approval_id)

        return {
            "placement_id": placement.id,
            "placement_reference_id": placement.reference_id,
            "client_id": placement.client_id,
            "timesheet_start_date": placement.timesheet_start_date,
            "timesheet_settings_config_type": placement.timesheet_settings_config_type,
            "timesheet_approval_config_type": placement.timesheet_approval_config_type,
            "timesheet_configuration_id": configuration.id,
            "cycle_id": configuration.cycle_id,
            "cycle_name": Cycle(configuration.cycle_id).label,
            "day_start_id": configuration.day_start_id,
            "day_name": WeekDay(configuration.day_start_id).label if configuration.day_start_id else None,
            "default_hours": configuration.default_hours,
            "ts_mandatory": configuration.ts_mandatory,
            "timesheet_approval_id": placement.timesheet_approval_id,
            "approvals": index["approvals"],
        }

    async def create_timesheet_configuration(
        self,
        placement_id: int,
        data: PlacementTimesheetConfigurationCreate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                self._placement(placement_id),
                self._not_configured,
                self._start_date,
                self._settings_source,
                when(custom_settings, require_cycle, require_default_hours, bi_weekly_start_day),
                self._approval_source,
                when(custom_approvals, *approval_steps(self.session)),
            ])
            context = await pipeline.run(data)
            placement = context["placement"]

            if data.timesheet_settings_config_type == ConfigType.CUSTOM:
                configuration = self._new_configuration(data, context, user_id)
                self.session.add(configuration)
                await self.session.flush()
                placement.timesheet_configuration_id = configuration.id
            else:
                placement.timesheet_configuration_id = context["timesheet_configuration_id"]

            if data.timesheet_approval_config_type == ConfigType.CUSTOM:
                setting = await self.approvals.store(ApprovalModule.TIMESHEET, False, data.approvals, user_id)
                placement.timesheet_approval_id = setting.id
            else:
                placement.timesheet_approval_id = context["timesheet_approval_id"]

            placement.timesheet_start_date = data.timesheet_start_date
            placement.timesheet_settings_config_type = int(data.timesheet_settings_config_type)
            placement.timesheet_approval_config_type = int(data.timesheet_approval_config_type)
            placement.updated_by = user_id
            await self.session.commit()

            logger.info(f"✅ Timesheet configuration created for placement {placement.reference_id} by user {user_id}")
            return await self.get_timesheet_configuration(placement.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating timesheet configuration for placement {placement_id}: {str(e)}")
            raise InternalServerError("Failed to create timesheet configuration", error=str(e))

    async def update_timesheet_configuration(
        self,
        placement_id: int,
        data: PlacementTimesheetConfigurationUpdate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                self._placement(placement_id),
                self._configured,
                self._start_date,
                self._settings_source,
                when(custom_settings, require_cycle, require_default_hours, bi_weekly_start_day),
                self._approval_source,
                when(keeps_custom_approvals, *approval_steps(self.session, existing=True)),
                when(becomes_custom_approvals, *approval_steps(self.session)),
            ])
            context = await pipeline.run(data)
            placement = context["placement"]
            now = datetime.now(timezone.utc)

            await self._apply_settings(placement, data, context, now, user_id)
            await self._apply_approvals(placement, data, context, user_id)

            placement.timesheet_start_date = data.timesheet_start_date
            placement.timesheet_settings_config_type = int(data.timesheet_settings_config_type)
            placement.timesheet_approval_config_type = int(data.timesheet_approval_config_type)
            placement.updated_by = user_id
            await self.session.commit()

            logger.info(f"✅ Timesheet configuration updated for placement {placement.reference_id} by user {user_id}")
            return await self.get_timesheet_configuration(placement.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating timesheet configuration for placement {placement_id}: {str(e)}")
            raise InternalServerError("Failed to update timesheet configuration", error=str(e))

    # region ========== Update Matrix ==========

    async def _apply_settings(self, placement: Placement, data, context, now: datetime, user_id: int) -> None:
        was_custom = placement.timesheet_settings_config_type == ConfigType.CUSTOM
        is_custom = data.timesheet_settings_config_type == ConfigType.CUSTOM

        if was_custom and is_custom:
            configuration = await self.session.get(TimesheetConfiguration, placement.timesheet_configuration_id)
            day = context["day"]
            configuration.cycle_id = int(context["cycle"])
            configuration.day_start_id = int(day) if day else None
            configuration.default_hours = data.default_hours.strip()
            configuration.ts_mandatory = data.ts_mandatory
            configuration.updated_by = user_id
            return

        if is_custom:
            configuration = self._new_configuration(data, context, user_id)
            self.session.add(configuration)
            await self.session.flush()
            placement.timesheet_configuration_id = configuration.id
            return

        if was_custom:
            configuration = await self.session.get(TimesheetConfiguration, placement.timesheet_configuration_id)
            configuration.deleted_at = now
            configuration.updated_by = user_id
        placement.timesheet_configuration_id = context["timesheet_configuration_id"]

    async def _apply_approvals(self, placement: Placement, data, context, user_id: int) -> None:
        was_custom = placement.timesheet_approval_config_type == ConfigType.CUSTOM
        is_custom = data.timesheet_approval_config_type == ConfigType.CUSTOM

        if was_custom and is_custom:
            await self.approvals.update(
                placement.timesheet_approval_id,
                data.approvals,
                data.delete_user_ids,
                data.delete_approval_level_ids,
                user_id
            )
            return

        if is_custom:
            setting = await self.approvals.store(ApprovalModule.TIMESHEET, False, data.approvals, user_id)
            placement.timesheet_approval_id = setting.id
            return

        if was_custom:
            await self.approvals.delete_setting(placement.timesheet_approval_id, user_id)
        placement.timesheet_approval_id = context["timesheet_approval_id"]

    def _new_configuration(self, data, context, user_id: int) -> TimesheetConfiguration:
        day = context["day"]
        return TimesheetConfiguration(
            cycle_id=int(context["cycle"]),
            day_start_id=int(day) if day else None,
            default_hours=data.default_hours.strip(),
            ts_mandatory=data.ts_mandatory,
            is_global=False,
            created_by=user_id
        )

    # endregion

    # region ========== Validation Steps ==========

    def _placement(self, placement_id: int):
        async def load_placement(payload, context):
            result = await self.session.execute(
                select(Placement, Company)
                .join(Company, Company.id == Placement.client_id)
                .where(Placement.id == placement_id, Placement.deleted_at.is_(None))
            )
            row = result.first()
            if not row:
                raise NotFoundError(f"Placement with ID {placement_id} not found")
            placement, company = row
            return context.with_values(placement=placement, company=company)

        return load_placement

    async def _not_configured(self, payload, context):
        placement = context["placement"]
        if placement.timesheet_settings_config_type is not None or placement.timesheet_configuration_id is not None:
            raise BusinessRuleViolation(f"Timesheet configuration already exists for placement {placement.reference_id}")

    async def _configured(self, payload, context):
        placement = context["placement"]
        if placement.timesheet_settings_config_type is None or placement.timesheet_approval_config_type is None:
            raise NotFoundError(f"Timesheet configuration not found for placement {placement.reference_id}")
        if placement.timesheet_approval_config_type == ConfigType.CUSTOM:
            return context.with_values(approval_setting_id=placement.timesheet_approval_id)

    def _start_date(self, payload, context):
        placement = context["placement"]
        if payload.timesheet_start_date < placement.start_date:
            raise ValidationError(
                f"Timesheet start date cannot be before the placement start date {placement.start_date.isoformat()}"
            )

    async def _settings_source(self, payload, context):
        """Resolve the inherited timesheet configuration for types 1 and 2"""
        config_type = payload.timesheet_settings_config_type
        if config_type == ConfigType.DEFAULT:
            result = await self.session.execute(
                select(TimesheetConfiguration.id).where(
                    TimesheetConfiguration.is_global.is_(True),
                    TimesheetConfiguration.deleted_at.is_(None)
                ).order_by(TimesheetConfiguration.id)
            )
            configuration_id = result.scalars().first()
            if configuration_id is None:
                raise ValidationError("Global timesheet configuration is not defined")
            return context.with_values(timesheet_configuration_id=configuration_id)

        if config_type == ConfigType.CLIENT:
            company = context["company"]
            if company.timesheet_configuration_id is None:
                raise ValidationError(f"Timesheet configuration is not defined for client {company.reference_id}")
            return context.with_values(timesheet_configuration_id=company.timesheet_configuration_id)

    async def _approval_source(self, payload, context):
        """Resolve the inherited timesheet approval chain for types 1 and 2"""
        config_type = payload.timesheet_approval_config_type
        if config_type == ConfigType.DEFAULT:
            setting = await self.approvals.find_global_setting(ApprovalModule.TIMESHEET)
            if not setting:
                raise ValidationError("Global timesheet approval configuration is not defined")
            return context.with_values(timesheet_approval_id=setting.id)

        if config_type == ConfigType.CLIENT:
            company = context["company"]
            if company.timesheet_approval_id is None:
                raise ValidationError(f"Timesheet approval is not defined for client {company.reference_id}")
            return context.with_values(timesheet_approval_id=company.timesheet_approval_id)

    # endregion
