import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_iso_date_only(value) -> Optional[date]:
    """'YYYY-MM-DD' -> date. Returns None for anything that does not parse."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    # strptime alone accepts unpadded months and days
    if not ISO_DATE_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def month_range(month: str) -> Optional[Tuple[date, date]]:
    """'YYYY-MM' -> (first day, first day of next month)."""
    try:
        year, mon = (int(v) for v in str(month or "").split("-"))
        start = date(year, mon, 1)
    except ValueError:
        return None
    if mon == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, mon + 1, 1)


def week_start(day: date) -> date:
    # Monday of the ISO week
    return day - timedelta(days=day.weekday())


def month_label(day: date) -> str:
    return day.strftime("%B %Y")
