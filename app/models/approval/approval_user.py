from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class ApprovalUser(BaseModel):
    __tablename__ = 'approval_users'

    approval_level_id = Column(Integer, ForeignKey('approval_levels.id'), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)

    # Relationships
    approval_level = relationship("ApprovalLevel", back_populates="approval_users")
    approver = relationship("Employee", foreign_keys=[approver_id])
