import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessRuleViolation, InternalServerError, NotFoundError
from app.models.approval.approval_settings import ApprovalSetting
from app.models.shared.enums import ApprovalModule
from app.schemas.approval.approval_configuration_schema import (
    ApprovalConfigurationCreate, ApprovalConfigurationUpdate
)
from app.services.approval.approval_configuration_service import ApprovalConfigurationService
from app.utils.validators.approval_validators import approval_steps
from app.utils.validators.pipeline import ValidationContext, ValidationPipeline

logger = logging.getLogger(__name__)

class GlobalApprovalService:
    """The tenant wide approval chain of each module"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.approvals = ApprovalConfigurationService(session)

    async def get_global_configurations(self, approval_module: ApprovalModule) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(ApprovalSetting.id).where(
                ApprovalSetting.approval_module == int(approval_module),
                ApprovalSetting.is_global.is_(True),
                ApprovalSetting.deleted_at.is_(None)
            ).order_by(ApprovalSetting.id)
        )
        return [await self.approvals.index(setting_id) for setting_id in result.scalars().all()]

    async def create_global_configuration(
        self,
        data: ApprovalConfigurationCreate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            pipeline = ValidationPipeline([
                self._single_global_setting,
                *approval_steps(self.session),
            ])
            await pipeline.run(data)

            setting = await self.approvals.store(data.approval_module, True, data.approvals, user_id)
            await self.session.commit()

            logger.info(f"✅ Global approval configuration {setting.id} created for module {int(data.approval_module)} by user {user_id}")
            return await self.approvals.index(setting.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating global approval configuration: {str(e)}")
            raise InternalServerError("Failed to create approval configuration", error=str(e))

    async def update_global_configuration(
        self,
        setting_id: int,
        data: ApprovalConfigurationUpdate,
        user_id: int
    ) -> Dict[str, Any]:
        try:
            setting = await self.approvals.get_setting(setting_id)
            if not setting.is_global:
                raise NotFoundError(f"Global approval configuration with ID {setting_id} not found")

            pipeline = ValidationPipeline(approval_steps(self.session, existing=True))
            await pipeline.run(data, ValidationContext({"approval_setting_id": setting.id}))

            await self.approvals.update(
                setting.id,
                data.approvals,
                data.delete_user_ids,
                data.delete_approval_level_ids,
                user_id
            )
            await self.session.commit()

            logger.info(f"✅ Global approval configuration {setting.id} updated by user {user_id}")
            return await self.approvals.index(setting.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating global approval configuration {setting_id}: {str(e)}")
            raise InternalServerError("Failed to update approval configuration", error=str(e))

    async def _single_global_setting(self, payload, context):
        existing = await self.approvals.find_global_setting(payload.approval_module)
        if existing:
            raise BusinessRuleViolation(
                f"Global approval configuration already exists for module {int(payload.approval_module)}"
            )
