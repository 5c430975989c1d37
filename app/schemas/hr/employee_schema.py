from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date

class EmployeeResponse(BaseModel):
    id: int
    reference_id: str
    first_name: str
    last_name: str
    display_name: Optional[str] = None
    email_id: str
    employment_type_id: int
    is_tenant_owner: bool
    status: str
    enable_login: bool
    relieving_date: Optional[date] = None
    rejoin_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)

class PlacementEndDate(BaseModel):
    placement_id: int
    end_date: date

class EmployeeDeactivateRequest(BaseModel):
    relieving_date: date
    placements: List[PlacementEndDate] = []

class EmployeeRejoinRequest(BaseModel):
    rejoin_date: date
    enable_login: bool = True
