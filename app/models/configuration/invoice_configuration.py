from sqlalchemy import Column, Integer, Boolean
from app.db.base import BaseModel

class InvoiceConfiguration(BaseModel):
    __tablename__ = 'invoice_configurations'

    cycle_id = Column(Integer, nullable=False)
    day_start_id = Column(Integer)
    net_pay_days = Column(Integer, nullable=False, default=30)
    is_global = Column(Boolean, default=False, nullable=False)
