from sqlalchemy import Column, Integer, Boolean
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class ApprovalSetting(BaseModel):
    __tablename__ = 'approval_settings'

    approval_module = Column(Integer, nullable=False)  # 1 timesheet, 2 invoice
    is_global = Column(Boolean, default=False, nullable=False)
    approval_count = Column(Integer, default=0, nullable=False)

    # Relationships
    levels = relationship("ApprovalLevel", back_populates="approval_setting")
