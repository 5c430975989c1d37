from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class ApprovalLevel(BaseModel):
    __tablename__ = 'approval_levels'

    approval_setting_id = Column(Integer, ForeignKey('approval_settings.id'), nullable=False, index=True)
    level = Column(Integer, nullable=False)  # rank, contiguous from 1 within a setting

    # Relationships
    approval_setting = relationship("ApprovalSetting", back_populates="levels")
    approval_users = relationship("ApprovalUser", back_populates="approval_level")
