from sqlalchemy import Column, Integer, String, Boolean, Date, Text
from app.db.base import BaseModel
from app.models.shared.enums import EmployeeStatus, EmploymentType

class Employee(BaseModel):
    __tablename__ = 'employees'

    reference_id = Column(String(30), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    display_name = Column(String(120))
    email_id = Column(String(100), unique=True, nullable=False)
    employment_type_id = Column(Integer, nullable=False, default=EmploymentType.INTERNAL.value)
    is_tenant_owner = Column(Boolean, default=False, nullable=False)
    status = Column(String(20), nullable=False, default=EmployeeStatus.ACTIVE.value)
    enable_login = Column(Boolean, default=True, nullable=False)
    relieving_date = Column(Date)
    rejoin_date = Column(Date)

    # Session tokens, cleared when the employee is deactivated
    access_token = Column(Text)
    refresh_token = Column(Text)
    fcm_token = Column(Text)

    @property
    def full_name(self) -> str:
        return self.display_name or f"{self.first_name} {self.last_name}"
