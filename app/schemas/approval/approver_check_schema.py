from pydantic import BaseModel
from typing import List, Optional

class ApproverMembership(BaseModel):
    """One approval level an employee approves on, with the owners of its setting"""
    approval_level_id: int
    approval_setting_id: int
    level: int
    approval_user_id: int
    approver_id: int
    is_approver: bool
    num_approval_users: int
    client_timesheet: Optional[str] = None
    client_invoice: Optional[str] = None
    placement_timesheet: Optional[str] = None
    placement_invoice: Optional[str] = None

    @property
    def references(self) -> List[str]:
        return [
            ref for ref in (
                self.client_timesheet,
                self.client_invoice,
                self.placement_timesheet,
                self.placement_invoice,
            )
            if ref is not None
        ]

class ApproverCheckResult(BaseModel):
    blocked: bool
    blocking_references: List[str] = []
