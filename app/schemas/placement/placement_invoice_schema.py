from datetime import date
from pydantic import BaseModel
from typing import List, Optional
from app.models.shared.enums import ConfigType
from app.schemas.approval.approval_configuration_schema import (
    ApprovalLevelIn, ApprovalLevelResponse
)

class PlacementInvoiceConfigurationCreate(BaseModel):
    invoice_start_date: date
    invoice_settings_config_type: ConfigType
    invoice_approval_config_type: ConfigType
    # Only read for a custom (type 3) invoice setting
    cycle_id: Optional[int] = None
    day_start_id: Optional[int] = None
    net_pay_days: Optional[int] = None
    # Only read for a custom (type 3) approval chain
    approvals: List[ApprovalLevelIn] = []

class PlacementInvoiceConfigurationUpdate(PlacementInvoiceConfigurationCreate):
    delete_user_ids: List[int] = []
    delete_approval_level_ids: List[int] = []

class PlacementInvoiceConfigurationResponse(BaseModel):
    placement_id: int
    placement_reference_id: str
    client_id: int
    invoice_start_date: Optional[date] = None
    invoice_settings_config_type: int
    invoice_approval_config_type: int
    invoice_configuration_id: int
    cycle_id: int
    cycle_name: str
    day_start_id: Optional[int] = None
    day_name: Optional[str] = None
    net_pay_days: int
    invoice_approval_id: int
    approvals: List[ApprovalLevelResponse] = []
