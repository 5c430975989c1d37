from sqlalchemy import Column, Integer, String, Date, ForeignKey
from app.db.base import BaseModel

class Placement(BaseModel):
    """An employee placed at a client"""
    __tablename__ = 'placements'

    reference_id = Column(String(30), unique=True, nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)

    # Timesheet setup, see ConfigType
    timesheet_start_date = Column(Date)
    timesheet_settings_config_type = Column(Integer)
    timesheet_approval_config_type = Column(Integer)
    timesheet_configuration_id = Column(Integer, ForeignKey('timesheet_configurations.id'))
    timesheet_approval_id = Column(Integer, ForeignKey('approval_settings.id'))
    invoice_approval_id = Column(Integer, ForeignKey('approval_settings.id'))

    # Invoice setup, see ConfigType
    invoice_start_date = Column(Date)
    invoice_settings_config_type = Column(Integer)
    invoice_approval_config_type = Column(Integer)
    invoice_configuration_id = Column(Integer, ForeignKey('invoice_configurations.id'))
