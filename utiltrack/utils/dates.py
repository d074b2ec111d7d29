"""Calendar helpers shared by every week-keyed operation.

Weeks start on Sunday. Every ``week_start`` stored or compared anywhere in
the application goes through :func:`week_start` first.
"""
from collections import OrderedDict
from datetime import date, datetime, timedelta

from utiltrack.errors import ValidationError
from utiltrack.models.enums import WeekClass

ISO_DATE_FORMAT = '%Y-%m-%d'


def week_start(day):
    """Most recent Sunday at or before ``day``"""
    if isinstance(day, datetime):
        day = day.date()
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_end(day):
    """Saturday closing the week of ``day``"""
    return week_start(day) + timedelta(days=6)


def weeks_in_range(start, end):
    """Sundays of every week overlapping [start, end], in order"""
    if end < start:
        raise ValidationError('End date must be on or after start date')
    current = week_start(start)
    last = week_start(end)
    weeks = []
    while current <= last:
        weeks.append(current)
        current += timedelta(weeks=1)
    return weeks


def classify_week(week, now):
    """PAST, CURRENT or FUTURE relative to the week containing ``now``"""
    week = week_start(week)
    current = week_start(now)
    if week < current:
        return WeekClass.PAST
    if week > current:
        return WeekClass.FUTURE
    return WeekClass.CURRENT


def default_date_range(today=None, weeks_back=4, weeks_ahead=8):
    today = today or date.today()
    return (week_start(today) - timedelta(weeks=weeks_back),
            week_end(today) + timedelta(weeks=weeks_ahead))


def is_business_day(day):
    return day.weekday() < 5


def business_days(start, end):
    """Monday to Friday dates within [start, end]"""
    days = []
    current = start
    while current <= end:
        if is_business_day(current):
            days.append(current)
        current += timedelta(days=1)
    return days


def parse_iso_date(value, field='date'):
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field} format. Use YYYY-MM-DD')


def group_weeks_by_month(weeks):
    grouped = OrderedDict()
    for week in weeks:
        grouped.setdefault(week.strftime('%Y-%m'), []).append(week)
    return grouped
