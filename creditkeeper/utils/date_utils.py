"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta


def add_months(from_date: date, months: int) -> date:
    """Add (or subtract) calendar months, clamping to the last day of the month"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_days(from_date: date, days: int) -> date:
    """Add (or subtract) days"""
    return from_date + timedelta(days=days)


def whole_months_between(start: date, end: date, days_per_month: int = 30) -> int:
    """Whole months elapsed from start to end using fixed-length months (never negative)"""
    return max(0, (end - start).days // days_per_month)
