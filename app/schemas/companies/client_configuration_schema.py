from pydantic import BaseModel
from typing import List, Optional
from app.schemas.approval.approval_configuration_schema import (
    ApprovalLevelIn, ApprovalLevelResponse
)

# region ========== Timesheet ==========

class ClientTimesheetConfigurationCreate(BaseModel):
    cycle_id: Optional[int] = None
    day_start_id: Optional[int] = None
    default_hours: Optional[str] = None
    ts_mandatory: bool = False
    approvals: List[ApprovalLevelIn] = []

class ClientTimesheetConfigurationUpdate(ClientTimesheetConfigurationCreate):
    delete_user_ids: List[int] = []
    delete_approval_level_ids: List[int] = []

class ClientTimesheetConfigurationResponse(BaseModel):
    company_id: int
    company_reference_id: str
    timesheet_configuration_id: int
    cycle_id: int
    cycle_name: str
    day_start_id: Optional[int] = None
    day_name: Optional[str] = None
    default_hours: str
    ts_mandatory: bool
    timesheet_approval_id: Optional[int] = None
    approvals: List[ApprovalLevelResponse] = []

# endregion

# region ========== Invoice ==========

class ClientInvoiceConfigurationCreate(BaseModel):
    cycle_id: Optional[int] = None
    day_start_id: Optional[int] = None
    net_pay_days: Optional[int] = None
    approvals: List[ApprovalLevelIn] = []

class ClientInvoiceConfigurationUpdate(ClientInvoiceConfigurationCreate):
    delete_user_ids: List[int] = []
    delete_approval_level_ids: List[int] = []

class ClientInvoiceConfigurationResponse(BaseModel):
    company_id: int
    company_reference_id: str
    invoice_configuration_id: int
    cycle_id: int
    cycle_name: str
    day_start_id: Optional[int] = None
    day_name: Optional[str] = None
    net_pay_days: int
    invoice_approval_id: Optional[int] = None
    approvals: List[ApprovalLevelResponse] = []

# endregion
