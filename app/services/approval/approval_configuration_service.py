import logging
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime, timezone
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.approval.approval_level import ApprovalLevel
from app.models.approval.approval_settings import ApprovalSetting
from app.models.approval.approval_user import ApprovalUser
from app.models.hr.employee import Employee
from app.models.shared.enums import ApprovalModule
from app.schemas.approval.approval_configuration_schema import ApprovalLevelIn
from app.services.approval.rank_order import normalize_rank

logger = logging.getLogger(__name__)

class ApprovalConfigurationService:
    """
    Approval settings, their ranked levels and the approvers on each level.

    Writes are flushed but never committed: the calling service owns the
    transaction so the chain is saved together with whatever owns it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # region ========== Read ==========

    async def get_setting(self, setting_id: int) -> ApprovalSetting:
        result = await self.session.execute(
            select(ApprovalSetting).where(
                ApprovalSetting.id == setting_id,
                ApprovalSetting.deleted_at.is_(None)
            )
        )
        setting = result.scalar_one_or_none()
        if not setting:
            raise NotFoundError(f"Approval configuration with ID {setting_id} not found")
        return setting

    async def find_global_setting(self, approval_module: ApprovalModule) -> Optional[ApprovalSetting]:
        result = await self.session.execute(
            select(ApprovalSetting).where(
                ApprovalSetting.approval_module == int(approval_module),
                ApprovalSetting.is_global.is_(True),
                ApprovalSetting.deleted_at.is_(None)
            ).order_by(ApprovalSetting.id)
        )
        return result.scalars().first()

    async def index(self, setting_id: int) -> Dict[str, Any]:
        """Setting with its active levels ordered by rank and their active approvers"""
        setting = await self.get_setting(setting_id)

        result = await self.session.execute(
            select(ApprovalLevel).where(
                ApprovalLevel.approval_setting_id == setting.id,
                ApprovalLevel.deleted_at.is_(None)
            ).order_by(ApprovalLevel.level, ApprovalLevel.id)
        )
        levels = result.scalars().all()

        approvers: Dict[int, List[Dict[str, Any]]] = {level.id: [] for level in levels}
        if levels:
            result = await self.session.execute(
                select(ApprovalUser, Employee)
                .join(Employee, Employee.id == ApprovalUser.approver_id)
                .where(
                    ApprovalUser.approval_level_id.in_(approvers.keys()),
                    ApprovalUser.deleted_at.is_(None)
                )
                .order_by(ApprovalUser.id)
            )
            for approval_user, employee in result.all():
                approvers[approval_user.approval_level_id].append({
                    "id": approval_user.id,
                    "employee_id": employee.id,
                    "full_name": employee.full_name,
                })

        return {
            "id": setting.id,
            "is_global": setting.is_global,
            "approval_module": setting.approval_module,
            "approvals": [
                {"id": level.id, "rank": level.level, "approver_ids": approvers[level.id]}
                for level in levels
            ],
        }

    # endregion

    # region ========== Write ==========

    async def store(
        self,
        approval_module: ApprovalModule,
        is_global: bool,
        approvals: Sequence[ApprovalLevelIn],
        user_id: Optional[int] = None
    ) -> ApprovalSetting:
        """Create a setting with one level per approval, ``level`` taken from its rank"""
        setting = ApprovalSetting(
            approval_module=int(approval_module),
            is_global=is_global,
            approval_count=len(approvals),
            created_by=user_id
        )
        self.session.add(setting)
        await self.session.flush()

        for approval in approvals:
            await self._add_level(setting.id, approval, user_id, existing=False)

        await self.session.flush()
        logger.info(
            f"Approval setting {setting.id} created for module {int(approval_module)} "
            f"with {len(approvals)} level(s)"
        )
        return setting

    async def update(
        self,
        setting_id: int,
        approvals: Sequence[ApprovalLevelIn],
        delete_user_ids: Sequence[int] = (),
        delete_approval_level_ids: Sequence[int] = (),
        user_id: Optional[int] = None
    ) -> ApprovalSetting:
        setting = await self.get_setting(setting_id)
        now = datetime.now(timezone.utc)

        for approval in approvals:
            if approval.id is None:
                await self._add_level(setting.id, approval, user_id, existing=True)
                continue

            level = await self.session.get(ApprovalLevel, approval.id)
            level.level = int(normalize_rank(approval.rank))
            level.updated_by = user_id
            for approver in approval.approver_ids:
                if approver.id is None and approver.employee_id is not None:
                    self.session.add(ApprovalUser(
                        approval_level_id=level.id,
                        approver_id=approver.employee_id,
                        created_by=user_id
                    ))

        if delete_user_ids:
            await self.session.execute(
                update(ApprovalUser)
                .where(ApprovalUser.id.in_(delete_user_ids), ApprovalUser.deleted_at.is_(None))
                .values(deleted_at=now, updated_by=user_id)
            )

        if delete_approval_level_ids:
            await self._soft_delete_levels(delete_approval_level_ids, now, user_id)

        await self.session.flush()
        setting.approval_count = await self._count_levels(setting.id)
        setting.updated_by = user_id
        await self.session.flush()

        logger.info(
            f"Approval setting {setting.id} updated: {setting.approval_count} level(s), "
            f"{len(delete_user_ids)} approver(s) and {len(delete_approval_level_ids)} level(s) removed"
        )
        return setting

    async def delete_setting(self, setting_id: int, user_id: Optional[int] = None) -> None:
        """Soft-delete a setting together with its levels and their approvers"""
        setting = await self.get_setting(setting_id)
        now = datetime.now(timezone.utc)

        result = await self.session.execute(
            select(ApprovalLevel.id).where(
                ApprovalLevel.approval_setting_id == setting.id,
                ApprovalLevel.deleted_at.is_(None)
            )
        )
        level_ids = result.scalars().all()
        if level_ids:
            await self._soft_delete_levels(level_ids, now, user_id)

        setting.deleted_at = now
        setting.updated_by = user_id
        await self.session.flush()
        logger.info(f"Approval setting {setting.id} deleted")

    # endregion

    async def _add_level(
        self,
        setting_id: int,
        approval: ApprovalLevelIn,
        user_id: Optional[int],
        existing: bool
    ) -> ApprovalLevel:
        level = ApprovalLevel(
            approval_setting_id=setting_id,
            level=int(normalize_rank(approval.rank)),
            created_by=user_id
        )
        self.session.add(level)
        await self.session.flush()

        for approver in approval.approver_ids:
            if approver.employee_id is None or (existing and approver.id is not None):
                continue
            self.session.add(ApprovalUser(
                approval_level_id=level.id,
                approver_id=approver.employee_id,
                created_by=user_id
            ))
        return level

    async def _soft_delete_levels(self, level_ids: Sequence[int], now: datetime, user_id: Optional[int]) -> None:
        await self.session.execute(
            update(ApprovalUser)
            .where(ApprovalUser.approval_level_id.in_(level_ids), ApprovalUser.deleted_at.is_(None))
            .values(deleted_at=now, updated_by=user_id)
        )
        await self.session.execute(
            update(ApprovalLevel)
            .where(ApprovalLevel.id.in_(level_ids), ApprovalLevel.deleted_at.is_(None))
            .values(deleted_at=now, updated_by=user_id)
        )

    async def _count_levels(self, setting_id: int) -> int:
        result = await self.session.execute(
            select(func.count(ApprovalLevel.id)).where(
                ApprovalLevel.approval_setting_id == setting_id,
                ApprovalLevel.deleted_at.is_(None)
            )
        )
        return result.scalar_one()
