from datetime import date
from pydantic import BaseModel
from typing import List, Optional
from app.models.shared.enums import ConfigType
from app.schemas.approval.approval_configuration_schema import (
    ApprovalLevelIn, ApprovalLevelResponse
)

class PlacementTimesheetConfigurationCreate(BaseModel):
    timesheet_start_date: date
    timesheet_settings_config_type: ConfigType
    timesheet_approval_config_type: ConfigType
    # Only read for a custom (type 3) timesheet setting
    cycle_id: Optional[int] = None
    day_start_id: Optional[int] = None
    default_hours: Optional[str] = None
    ts_mandatory: bool = False
    # Only read for a custom (type 3) approval chain
    approvals: List[ApprovalLevelIn] = []

class PlacementTimesheetConfigurationUpdate(PlacementTimesheetConfigurationCreate):
    delete_user_ids: List[int] = []
    delete_approval_level_ids: List[int] = []

class PlacementTimesheetConfigurationResponse(BaseModel):
    placement_id: int
    placement_reference_id: str
    client_id: int
    timesheet_start_date: Optional[date] = None
    timesheet_settings_config_type: int
    timesheet_approval_config_type: int
    timesheet_configuration_id: int
    cycle_id: int
    cycle_name: str
    day_start_id: Optional[int] = None
    day_name: Optional[str] = None
    default_hours: str
    ts_mandatory: bool
    timesheet_approval_id: int
    approvals: List[ApprovalLevelResponse] = []
