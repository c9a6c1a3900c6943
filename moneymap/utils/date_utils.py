"""Calendar-month helpers"""

from datetime import date, timedelta
from typing import List

from dateutil.relativedelta import relativedelta


def month_start(day: date) -> date:
    """First day of the month containing `day`"""
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Last day of the month containing `day`"""
    return month_start(day) + relativedelta(months=1) - timedelta(days=1)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length"""
    return day + relativedelta(months=months)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def day_in_month(month: date, day: int) -> date:
    """The given day-of-month inside `month`, clamped for short months"""
    return month_start(month).replace(day=min(day, month_end(month).day))


def month_range(start: date, end: date) -> List[date]:
    """Month starts from start's month to end's month (inclusive)"""
    months = []
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        months.append(current)
        current += relativedelta(months=1)
    return months
