from fastapi import APIRouter
from app.api.v1.endpoints.companies import invoice_configuration, timesheet_configuration
from app.api.v1.endpoints.configurations import approval_configuration
from app.api.v1.endpoints.hr import employees
from app.api.v1.endpoints.placement import invoice_configuration as placement_invoice_configuration
from app.api.v1.endpoints.placement import timesheet_configuration as placement_timesheet_configuration

api_router = APIRouter()

# Configuration routes
api_router.include_router(approval_configuration.router, prefix="/configurations", tags=["Configurations"])

# Company routes
api_router.include_router(timesheet_configuration.router, prefix="/companies", tags=["Companies"])
api_router.include_router(invoice_configuration.router, prefix="/companies", tags=["Companies"])

# Placement routes
api_router.include_router(placement_timesheet_configuration.router, prefix="/placements", tags=["Placements"])
api_router.include_router(placement_invoice_configuration.router, prefix="/placements", tags=["Placements"])

# HR routes
api_router.include_router(employees.router, prefix="/employees", tags=["Employees"])
