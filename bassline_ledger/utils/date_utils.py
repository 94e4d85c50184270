"""Date manipulation utilities"""

from datetime import datetime, timezone
from typing import Callable
from dateutil.relativedelta import relativedelta

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def add_months(from_date: datetime, months: int = 1) -> datetime:
    """Add calendar months, clamping to the last day of shorter months"""
    return from_date + relativedelta(months=months)


def in_calendar_month(moment: datetime, year: int, month: int) -> bool:
    """True if moment (read in UTC) falls in the given 1-indexed month"""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.year == year and moment.month == month
