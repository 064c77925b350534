"""Local wall-clock helpers used by the dialogue and the scheduler."""

from datetime import datetime, date
from typing import Optional

import pytz


def local_now(timezone: pytz.BaseTzInfo, now: Optional[datetime] = None) -> datetime:
    """
    Current time in the given timezone.

    Args:
        timezone: Target timezone
        now: Instant to convert instead of the real clock (naive values are taken as UTC)
    """
    if now is None:
        return datetime.now(timezone)
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)
    return now.astimezone(timezone)


def local_today(timezone: pytz.BaseTzInfo, now: Optional[datetime] = None) -> date:
    return local_now(timezone, now).date()


def hhmm(moment: datetime) -> str:
    return moment.strftime("%H:%M")
