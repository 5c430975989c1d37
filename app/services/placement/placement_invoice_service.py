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
from app.models.configuration.invoice_configuration import InvoiceConfiguration
from app.models.placement.placement import Placement
from app.models.shared.enums import ApprovalModule, ConfigType, Cycle, WeekDay
from app.schemas.placement.placement_invoice_schema import (
    PlacementInvoiceConfigurationCreate, PlacementInvoiceConfigurationUpdate
)
from app.services.approval.approval_configuration_service import ApprovalConfigurationService
from app.utils.validators.approval_validators import approval_steps
from app.utils.validators.configuration_validators import require_cycle, require_net_pay_days
from app.utils.validators.pipeline import ValidationPipeline, when

logger = logging.getLogger(__name__)


def custom_settings(payload, context) -> bool:
    return payload.invoice_settings_config_type == ConfigType.CUSTOM


def custom_approvals(payload, context) -> bool:
    return payload.invoice_approval_config_type == ConfigType.CUSTOM


def keeps_custom_approvals(payload, context) -> bool:
    return custom_approvals(payload, context) and \
        context["placement"].invoice_approval_config_type == ConfigType.CUSTOM


def becomes_custom_approvals(payload, context) -> bool:
    return custom_approvals(payload, context) and not keeps_custom_approvals(payload, context)


class PlacementInvoiceService:
    """Invoice settings and approval chain of a placement, inherited or custom"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.approvals = ApprovalConfigurationService(session)

    async def get_invoice_configuration(self, placement_id: int) -> Dict[str, Any]:
        result = await self.session.execute(
            select(Placement, InvoiceConfiguration)
            .join(InvoiceConfiguration, InvoiceConfiguration.id == Placement.invoice_configuration_id)
            .where(Placement.id == placement_id, Placement.deleted_at.is_(None))
        )
        row = result.first()
        if not row or row[0].invoice_approval_id is None:
            raise NotFoundError(f"Invoice configuration not found for placement {placement_id}")

        placement, configuration = row
        index = await self.approvals.index(placement.invoice_approval_id)

        return {
            "placement_id": placement.id,
            "placement_reference_id": placement.reference_id,
            "client_id": placement.client_id,
            "invoice_start_date": placement.invoice_start_date,
            "invoice_settings_config_type": placement.invoice_settings_config_type,
            "invoice_approval_config_type": placement.invoice_approval_config_type,
            "invoice_configuration_id": configuration.id,
            "cycle_id": configuration.cycle_id,
            "cycle_name": Cycle(configuration.cycle_id).label,
            "day_start_id": configuration.day_start_id,
            "day_name": WeekDay(configuration.day_start_id).label if configuration.day_start_id else None,
            "net_pay_days": configuration.net_pay_days,
            "invoice_approval_id": placement.invoice_approval_id,
            "approvals": index["approvals"],
        }

    async def create_invoice_configuration(
        self,
        placement_id: int,
        data: PlacementInvoiceConfigurationCreate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                self._placement(placement_id),
                self._not_configured,
                self._start_date,
                self._settings_source,
                when(custom_settings, require_cycle, require_net_pay_days),
                self._approval_source,
                when(custom_approvals, *approval_steps(self.session)),
            ])
            context = await pipeline.run(data)
            placement = context["placement"]

            if data.invoice_settings_config_type == ConfigType.CUSTOM:
                configuration = self._new_configuration(data, context, user_id)
                self.session.add(configuration)
                await self.session.flush()
                placement.invoice_configuration_id = configuration.id
            else:
                placement.invoice_configuration_id = context["invoice_configuration_id"]

            if data.invoice_approval_config_type == ConfigType.CUSTOM:
                setting = await self.approvals.store(ApprovalModule.INVOICE, False, data.approvals, user_id)
                placement.invoice_approval_id = setting.id
            else:
                placement.invoice_approval_id = context["invoice_approval_id"]

            self._set_types(placement, data, user_id)
            await self.session.commit()

            logger.info(f"✅ Invoice configuration created for placement {placement.reference_id} by user {user_id}")
            return await self.get_invoice_configuration(placement.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating invoice configuration for placement {placement_id}: {str(e)}")
            raise InternalServerError("Failed to create invoice configuration", error=str(e))

    async def update_invoice_configuration(
        self,
        placement_id: int,
        data: PlacementInvoiceConfigurationUpdate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                self._placement(placement_id),
                self._configured,
                self._start_date,
                self._settings_source,
                when(custom_settings, require_cycle, require_net_pay_days),
                self._approval_source,
                when(keeps_custom_approvals, *approval_steps(self.session, existing=True)),
                when(becomes_custom_approvals, *approval_steps(self.session)),
            ])
            context = await pipeline.run(data)
            placement = context["placement"]

            await self._apply_settings(placement, data, context, user_id)
            await self._apply_approvals(placement, data, context, user_id)

            self._set_types(placement, data, user_id)
            await self.session.commit()

            logger.info(f"✅ Invoice configuration updated for placement {placement.reference_id} by user {user_id}")
            return await self.get_invoice_configuration(placement.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating invoice configuration for placement {placement_id}: {str(e)}")
            raise InternalServerError("Failed to update invoice configuration", error=str(e))

    # region ========== Update Matrix ==========

    async def _apply_settings(self, placement: Placement, data, context, user_id: int) -> None:
        was_custom = placement.invoice_settings_config_type == ConfigType.CUSTOM
        is_custom = data.invoice_settings_config_type == ConfigType.CUSTOM

        if was_custom and is_custom:
            configuration = await self.session.get(InvoiceConfiguration, placement.invoice_configuration_id)
            day = context["day"]
            configuration.cycle_id = int(context["cycle"])
            configuration.day_start_id = int(day) if day else None
            configuration.net_pay_days = data.net_pay_days
            configuration.updated_by = user_id
            return

        if is_custom:
            configuration = self._new_configuration(data, context, user_id)
            self.session.add(configuration)
            await self.session.flush()
            placement.invoice_configuration_id = configuration.id
            return

        if was_custom:
            configuration = await self.session.get(InvoiceConfiguration, placement.invoice_configuration_id)
            configuration.deleted_at = datetime.now(timezone.utc)
            configuration.updated_by = user_id
        placement.invoice_configuration_id = context["invoice_configuration_id"]

    async def _apply_approvals(self, placement: Placement, data, context, user_id: int) -> None:
        was_custom = placement.invoice_approval_config_type == ConfigType.CUSTOM
        is_custom = data.invoice_approval_config_type == ConfigType.CUSTOM

        if was_custom and is_custom:
            await self.approvals.update(
                placement.invoice_approval_id,
                data.approvals,
                data.delete_user_ids,
                data.delete_approval_level_ids,
                user_id
            )
            return

        if is_custom:
            setting = await self.approvals.store(ApprovalModule.INVOICE, False, data.approvals, user_id)
            placement.invoice_approval_id = setting.id
            return

        if was_custom:
            await self.approvals.delete_setting(placement.invoice_approval_id, user_id)
        placement.invoice_approval_id = context["invoice_approval_id"]

    def _new_configuration(self, data, context, user_id: int) -> InvoiceConfiguration:
        day = context["day"]
        return InvoiceConfiguration(
            cycle_id=int(context["cycle"]),
            day_start_id=int(day) if day else None,
            net_pay_days=data.net_pay_days,
            is_global=False,
            created_by=user_id
        )

    def _set_types(self, placement: Placement, data, user_id: int) -> None:
        placement.invoice_start_date = data.invoice_start_date
        placement.invoice_settings_config_type = int(data.invoice_settings_config_type)
        placement.invoice_approval_config_type = int(data.invoice_approval_config_type)
        placement.updated_by = user_id

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
        if placement.invoice_settings_config_type is not None or placement.invoice_configuration_id is not None:
            raise BusinessRuleViolation(f"Invoice configuration already exists for placement {placement.reference_id}")

    async def _configured(self, payload, context):
        placement = context["placement"]
        if placement.invoice_settings_config_type is None or placement.invoice_approval_config_type is None:
            raise NotFoundError(f"Invoice configuration not found for placement {placement.reference_id}")
        if placement.invoice_approval_config_type == ConfigType.CUSTOM:
            return context.with_values(approval_setting_id=placement.invoice_approval_id)

    def _start_date(self, payload, context):
        placement = context["placement"]
        if payload.invoice_start_date < placement.start_date:
            raise ValidationError(
                f"Invoice start date cannot be before the placement start date {placement.start_date.isoformat()}"
            )

    async def _settings_source(self, payload, context):
        """Resolve the inherited invoice configuration for types 1 and 2"""
        config_type = payload.invoice_settings_config_type
        if config_type == ConfigType.DEFAULT:
            result = await self.session.execute(
                select(InvoiceConfiguration.id).where(
                    InvoiceConfiguration.is_global.is_(True),
                    InvoiceConfiguration.deleted_at.is_(None)
                ).order_by(InvoiceConfiguration.id)
            )
            configuration_id = result.scalars().first()
            if configuration_id is None:
                raise ValidationError("Global invoice configuration is not defined")
            return context.with_values(invoice_configuration_id=configuration_id)

        if config_type == ConfigType.CLIENT:
            company = context["company"]
            if company.invoice_configuration_id is None:
                raise ValidationError(f"Invoice configuration is not defined for client {company.reference_id}")
            return context.with_values(invoice_configuration_id=company.invoice_configuration_id)

    async def _approval_source(self, payload, context):
        """Resolve the inherited invoice approval chain for types 1 and 2"""
        config_type = payload.invoice_approval_config_type
        if config_type == ConfigType.DEFAULT:
            setting = await self.approvals.find_global_setting(ApprovalModule.INVOICE)
            if not setting:
                raise ValidationError("Global invoice approval configuration is not defined")
            return context.with_values(invoice_approval_id=setting.id)

        if config_type == ConfigType.CLIENT:
            company = context["company"]
            if company.invoice_approval_id is None:
                raise ValidationError(f"Invoice approval is not defined for client {company.reference_id}")
            return context.with_values(invoice_approval_id=company.invoice_approval_id)

    # endregion
