from enum import Enum

class UserRole(Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"

class GroupType(Enum):
    TECH = "TECH"
    AI = "AI"
    SA = "SA"
    UX = "UX"

class RoleLevel(Enum):
    LVL2 = "LVL2"
    LVL3 = "LVL3"
    LVL4 = "LVL4"
    LVL5 = "LVL5"
    LEAD = "LEAD"

class OvertimePreference(Enum):
    NONE = "NONE"
    LIMITED = "LIMITED"
    OPEN = "OPEN"

class ProjectType(Enum):
    BILLABLE = "BILLABLE"
    ASSIGNED = "ASSIGNED"
    FILLER = "FILLER"
    PROJECTED = "PROJECTED"

class ProjectStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

class AllocationEntryType(Enum):
    ACTUAL = "ACTUAL"
    PROJECTED = "PROJECTED"

class PTOStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"

class WeekClass(Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"

class ViewMode(Enum):
    ACTUAL = "actual"
    PROJECTED = "projected"
    DIFFERENCE = "difference"

class UtilizationStatus(Enum):
    UNDER = "under"
    NORMAL = "normal"
    OVER = "over"
