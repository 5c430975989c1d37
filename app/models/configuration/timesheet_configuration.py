from sqlalchemy import Column, Integer, String, Boolean
from app.db.base import BaseModel

class TimesheetConfiguration(BaseModel):
    __tablename__ = 'timesheet_configurations'

    cycle_id = Column(Integer, nullable=False)
    day_start_id = Column(Integer)
    default_hours = Column(String(5), nullable=False, default="08:00")  # HH:MM
    ts_mandatory = Column(Boolean, default=False, nullable=False)
    is_global = Column(Boolean, default=False, nullable=False)
