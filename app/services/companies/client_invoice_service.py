import logging
from typing import Any, Dict

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleViolation, InternalServerError, NotFoundError
from app.models.companies.company import Company
from app.models.configuration.invoice_configuration import InvoiceConfiguration
from app.models.shared.enums import ApprovalModule, Cycle, WeekDay
from app.schemas.companies.client_configuration_schema import (
    ClientInvoiceConfigurationCreate, ClientInvoiceConfigurationUpdate
)
from app.services.approval.approval_configuration_service import ApprovalConfigurationService
from app.utils.validators.approval_validators import approval_steps
from app.utils.validators.configuration_validators import (
    client_company, require_cycle, require_net_pay_days
)
from app.utils.validators.pipeline import ValidationPipeline

logger = logging.getLogger(__name__)

class ClientInvoiceService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.approvals = ApprovalConfigurationService(session)

    async def get_invoice_configuration(self, company_id: int) -> Dict[str, Any]:
        """Invoice cycle, pay terms and approval chain of a client"""
        result = await self.session.execute(
            select(Company, InvoiceConfiguration)
            .join(InvoiceConfiguration, InvoiceConfiguration.id == Company.invoice_configuration_id)
            .where(
                Company.id == company_id,
                Company.deleted_at.is_(None),
                InvoiceConfiguration.deleted_at.is_(None)
            )
        )
        row = result.first()
        if not row:
            raise NotFoundError(f"Invoice configuration not found for company {company_id}")

        company, configuration = row
        approvals = []
        if company.invoice_approval_id:
            approvals = (await self.approvals.index(company.invoice_approval_id))["approvals"]

        return {
            "company_id": company.id,
            "company_reference_id": company.reference_id,
            "invoice_configuration_id": configuration.id,
            "cycle_id": configuration.cycle_id,
            "cycle_name": Cycle(configuration.cycle_id).label,
            "day_start_id": configuration.day_start_id,
            "day_name": WeekDay(configuration.day_start_id).label if configuration.day_start_id else None,
            "net_pay_days": configuration.net_pay_days,
            "invoice_approval_id": company.invoice_approval_id,
            "approvals": approvals,
        }

    async def create_invoice_configuration(
        self,
        company_id: int,
        data: ClientInvoiceConfigurationCreate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                client_company(self.session, company_id),
                self._not_configured,
                require_cycle,
                require_net_pay_days,
                *approval_steps(self.session),
            ])
            context = await pipeline.run(data)
            company = context["company"]
            day = context["day"]

            configuration = InvoiceConfiguration(
                cycle_id=int(context["cycle"]),
                day_start_id=int(day) if day else None,
                net_pay_days=data.net_pay_days,
                created_by=user_id
            )
            self.session.add(configuration)
            await self.session.flush()

            setting = await self.approvals.store(ApprovalModule.INVOICE, False, data.approvals, user_id)

            company.invoice_configuration_id = configuration.id
            company.invoice_approval_id = setting.id
            company.updated_by = user_id
            await self.session.commit()

            logger.info(f"✅ Invoice configuration created for client {company.reference_id} by user {user_id}")
            return await self.get_invoice_configuration(company.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating invoice configuration for company {company_id}: {str(e)}")
            raise InternalServerError("Failed to create invoice configuration", error=str(e))

    async def update_invoice_configuration(
        self,
        company_id: int,
        data: ClientInvoiceConfigurationUpdate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                client_company(self.session, company_id),
                self._configured,
                require_cycle,
                require_net_pay_days,
                *approval_steps(self.session, existing=True),
            ])
            context = await pipeline.run(data)
            company = context["company"]
            day = context["day"]

            configuration = await self.session.get(InvoiceConfiguration, company.invoice_configuration_id)
            configuration.cycle_id = int(context["cycle"])
            configuration.day_start_id = int(day) if day else None
            configuration.net_pay_days = data.net_pay_days
            configuration.updated_by = user_id

            await self.approvals.update(
                company.invoice_approval_id,
                data.approvals,
                data.delete_user_ids,
                data.delete_approval_level_ids,
                user_id
            )
            await self.session.commit()

            logger.info(f"✅ Invoice configuration updated for client {company.reference_id} by user {user_id}")
            return await self.get_invoice_configuration(company.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating invoice configuration for company {company_id}: {str(e)}")
            raise InternalServerError("Failed to update invoice configuration", error=str(e))

    # region ========== Validation Steps ==========

    async def _not_configured(self, payload, context):
        company = context["company"]
        if company.invoice_configuration_id is not None or company.invoice_approval_id is not None:
            raise BusinessRuleViolation(f"Invoice configuration already exists for client {company.reference_id}")

    async def _configured(self, payload, context):
        company = context["company"]
        if company.invoice_configuration_id is None or company.invoice_approval_id is None:
            raise NotFoundError(f"Invoice configuration not found for client {company.reference_id}")
        return context.with_values(approval_setting_id=company.invoice_approval_id)

    # endregion
