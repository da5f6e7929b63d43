from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from .exceptions import InvalidStatementInput


def parse_iso_date(raw: Optional[str], field: str) -> date:
    """'YYYY-MM-DD' -> date. A trailing time part is tolerated and dropped."""
    if raw is None or not str(raw).strip():
        raise InvalidStatementInput(f"{field} is required")
    text = str(raw).strip()
    day, sep, clock = text.replace(" ", "T", 1).partition("T")
    try:
        if sep:
            # the time part must itself be valid, then it is dropped
            datetime.fromisoformat(day + "T" + clock.replace("Z", "+00:00"))
        return date.fromisoformat(day)
    except ValueError:
        raise InvalidStatementInput(f"{field} must be an ISO date (YYYY-MM-DD), got {text!r}")


def last_day_of_month(year: int, month: int) -> date:
    # First day of next month, minus one day
    y = year + (1 if month == 12 else 0)
    m = 1 if month == 12 else month + 1
    return date(y, m, 1) - timedelta(days=1)


def month_period(year: int, month: int) -> Tuple[date, date]:
    if not 2000 <= year <= 2100:
        raise InvalidStatementInput("year must be between 2000 and 2100")
    if not 1 <= month <= 12:
        raise InvalidStatementInput("month must be between 1 and 12")
    return date(year, month, 1), last_day_of_month(year, month)


def period_window(start: date, end: date) -> Tuple[datetime, datetime]:
    """Inclusive UTC window: start 00:00:00 .. end 23:59:59."""
    lo = datetime.combine(start, time.min, tzinfo=timezone.utc)
    hi = datetime.combine(end, time(23, 59, 59), tzinfo=timezone.utc)
    return lo, hi


def period_timestamps(start: date, end: date) -> Tuple[int, int]:
    """Unix seconds for the inclusive window, as the upstream expects them."""
    lo, hi = period_window(start, end)
    return int(lo.timestamp()), int(hi.timestamp())
