"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of short months"""
    return from_date + relativedelta(months=months)


def utc_now() -> datetime:
    """Timezone-aware current time, used as the default clock"""
    return datetime.now(timezone.utc)
