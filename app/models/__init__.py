from app.models.approval.approval_settings import ApprovalSetting
from app.models.approval.approval_level import ApprovalLevel
from app.models.approval.approval_user import ApprovalUser
from app.models.hr.employee import Employee
from app.models.companies.company import Company
from app.models.placement.placement import Placement
from app.models.configuration.timesheet_configuration import TimesheetConfiguration
from app.models.configuration.invoice_configuration import InvoiceConfiguration
