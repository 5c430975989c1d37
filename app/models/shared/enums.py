from enum import Enum, IntEnum

# region ========== Approvals ==========

class ApprovalModule(IntEnum):
    TIMESHEET = 1
    INVOICE = 2

class ConfigType(IntEnum):
    """Where a placement takes its configuration from"""
    DEFAULT = 1     # global configuration
    CLIENT = 2      # configuration of the placement's client
    CUSTOM = 3      # configuration owned by the placement

# endregion

# region ========== Companies ==========

class EntityType(str, Enum):
    CLIENT = "client"
    VENDOR = "vendor"
    END_CLIENT = "end-client"

# endregion

# region ========== Employees ==========

class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "In Active"

class EmploymentType(IntEnum):
    INTERNAL = 1
    CONSULTANT = 2
    CONTRACTOR = 3

# endregion

# region ========== Cycles ==========

class Cycle(IntEnum):
    WEEKLY = 1
    BI_WEEKLY = 2
    SEMI_MONTHLY = 3
    MONTHLY = 4
    CONFIGURABLE = 5

    @property
    def label(self) -> str:
        return {
            Cycle.WEEKLY: "Weekly",
            Cycle.BI_WEEKLY: "Bi-Weekly",
            Cycle.SEMI_MONTHLY: "Semi Monthly",
            Cycle.MONTHLY: "Monthly",
            Cycle.CONFIGURABLE: "Configurable",
        }[self]

    @property
    def needs_start_day(self) -> bool:
        return self in (Cycle.WEEKLY, Cycle.BI_WEEKLY)

class WeekDay(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def label(self) -> str:
        return self.name.title()

# endregion
