from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Union
from app.models.shared.enums import ApprovalModule

class ApproverIn(BaseModel):
    id: Optional[int] = None  # existing approval user
    employee_id: Optional[int] = None

class ApprovalLevelIn(BaseModel):
    id: Optional[int] = None  # existing approval level
    rank: Optional[Union[int, str]] = None
    approver_ids: List[ApproverIn] = []

class ApprovalChangeSet(BaseModel):
    """Approval chain fields shared by every update payload"""
    approvals: List[ApprovalLevelIn] = []
    delete_user_ids: List[int] = []
    delete_approval_level_ids: List[int] = []

class ApprovalConfigurationCreate(BaseModel):
    approval_module: ApprovalModule
    approvals: List[ApprovalLevelIn] = []

class ApprovalConfigurationUpdate(ApprovalChangeSet):
    pass

class ApproverResponse(BaseModel):
    id: int
    employee_id: int
    full_name: str

class ApprovalLevelResponse(BaseModel):
    id: int
    rank: int
    approver_ids: List[ApproverResponse] = []

class ApprovalConfigurationResponse(BaseModel):
    id: int
    is_global: bool
    approval_module: int
    approvals: List[ApprovalLevelResponse] = []

    model_config = ConfigDict(from_attributes=True)
