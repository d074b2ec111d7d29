from .enums import (UserRole, GroupType, RoleLevel, OvertimePreference, ProjectType, ProjectStatus,
                   AllocationEntryType, PTOStatus, WeekClass, ViewMode, UtilizationStatus)
from .consultant import Consultant, ConsultantGroup, ConsultantRole
from .project import Project
from .user import User
from .allocation import Allocation
from .pto_request import PTORequest

__all__ = [
    'UserRole', 'GroupType', 'RoleLevel', 'OvertimePreference', 'ProjectType', 'ProjectStatus',
    'AllocationEntryType', 'PTOStatus', 'WeekClass', 'ViewMode', 'UtilizationStatus',
    'Consultant', 'ConsultantGroup', 'ConsultantRole', 'Project', 'User', 'Allocation', 'PTORequest'
]
