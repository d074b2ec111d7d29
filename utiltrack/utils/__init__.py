from .validators import (
    validate_required_fields, validate_hours, validate_time_format,
    validate_entry_type, validate_view_mode, validate_group_type, validate_role_level,
    validate_overtime_preference, validate_project_type, validate_project_status, validate_pto_status
)
from .dates import (
    week_start, week_end, weeks_in_range, classify_week, default_date_range,
    business_days, is_business_day, parse_iso_date, group_weeks_by_month
)

__all__ = [
    'validate_required_fields', 'validate_hours', 'validate_time_format',
    'validate_entry_type', 'validate_view_mode', 'validate_group_type', 'validate_role_level',
    'validate_overtime_preference', 'validate_project_type', 'validate_project_status', 'validate_pto_status',
    'week_start', 'week_end', 'weeks_in_range', 'classify_week', 'default_date_range',
    'business_days', 'is_business_day', 'parse_iso_date', 'group_weeks_by_month'
]
