from sqlalchemy import Column, Integer, String, ForeignKey
from app.db.base import BaseModel
from app.models.shared.enums import EntityType

class Company(BaseModel):
    """Client, vendor or end-client of the staffing agency"""
    __tablename__ = 'companies'

    reference_id = Column(String(30), unique=True, nullable=False, index=True)
    name = Column(String(150), nullable=False)
    entity_type = Column(String(20), nullable=False, default=EntityType.CLIENT.value)

    timesheet_configuration_id = Column(Integer, ForeignKey('timesheet_configurations.id'))
    timesheet_approval_id = Column(Integer, ForeignKey('approval_settings.id'))
    invoice_configuration_id = Column(Integer, ForeignKey('invoice_configurations.id'))
    invoice_approval_id = Column(Integer, ForeignKey('approval_settings.id'))
