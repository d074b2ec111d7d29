import math
import re
from utiltrack.models import (AllocationEntryType, GroupType, RoleLevel, OvertimePreference,
                              ProjectType, ProjectStatus, PTOStatus, ViewMode)

def validate_required_fields(data, required_fields):
    """Validate that required fields are present in data"""
    if not data:
        return False, "No data provided"

    for field in required_fields:
        if field not in data or data.get(field) in (None, '', []):
            return False, f"{field} is required"

    return True, ""

def validate_hours(hours, minimum=0, maximum=None, field='hours'):
    """Validate hours is a non-negative number within optional bounds"""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        return False, f"{field} must be a number"

    if not math.isfinite(hours):
        return False, f"{field} must be a finite number"

    if hours < minimum:
        return False, f"{field} must be at least {minimum}"

    if maximum is not None and hours > maximum:
        return False, f"{field} must be at most {maximum}"

    return True, float(hours)

def validate_time_format(time_string):
    """Validate time string is in HH:MM format and return (hour, minute)"""
    if not isinstance(time_string, str) or not re.match(r'^\d{2}:\d{2}$', time_string):
        return False, "Invalid time format. Use HH:MM"

    hour, minute = (int(part) for part in time_string.split(':'))
    if hour > 23 or minute > 59:
        return False, "Invalid time format. Use HH:MM"

    return True, (hour, minute)

def validate_entry_type(entry_type_str):
    """Validate allocation entry type enum"""
    if isinstance(entry_type_str, AllocationEntryType):
        return True, entry_type_str
    if isinstance(entry_type_str, str) and entry_type_str.lower() == ViewMode.DIFFERENCE.value:
        return False, "The difference view is not editable"
    try:
        return True, AllocationEntryType(str(entry_type_str).upper())
    except ValueError:
        return False, "Invalid entry type"

def validate_view_mode(view_str):
    """Validate utilization view mode enum"""
    try:
        return True, ViewMode(view_str)
    except ValueError:
        return False, "Invalid view. Use actual, projected or difference"

def validate_group_type(group_str):
    """Validate consultant group enum"""
    try:
        return True, GroupType(group_str)
    except ValueError:
        return False, f"Invalid group: {group_str}"

def validate_role_level(level_str):
    """Validate consultant role level enum"""
    try:
        return True, RoleLevel(level_str)
    except ValueError:
        return False, f"Invalid role level: {level_str}"

def validate_overtime_preference(preference_str):
    """Validate overtime preference enum"""
    try:
        return True, OvertimePreference(preference_str)
    except ValueError:
        return False, "Invalid overtime preference"

def validate_project_type(type_str):
    """Validate project type enum"""
    try:
        return True, ProjectType(type_str)
    except ValueError:
        return False, "Invalid project type"

def validate_project_status(status_str):
    """Validate project status enum"""
    try:
        return True, ProjectStatus(status_str)
    except ValueError:
        return False, "Invalid project status"

def validate_pto_status(status_str):
    """Validate PTO request status enum"""
    try:
        return True, PTOStatus(status_str)
    except ValueError:
        return False, "Invalid PTO status"
