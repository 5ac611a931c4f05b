"""
Request Window Planning Module

Splits a calendar month into consecutive request windows that respect the
FIRMS area API day-range ceiling (1..10 days per request).
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

DAY_MAX = 10  # 1..10 per API request

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{1,2})$")


@dataclass(frozen=True)
class RequestWindow:
    """One bounded time span submitted to the API for a single source."""

    start: date
    span: int

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    def describe(self) -> str:
        return f"{self.start_iso} ({self.span}d)"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def plan_windows(year: int, month: int, day_max_span: int = DAY_MAX) -> List[RequestWindow]:
    """
    Partition a month into ascending request windows.

    Args:
        year: Target year
        month: Target month (1-12)
        day_max_span: Largest span a single request may cover (1-10)

    Returns:
        Windows covering days 1..N; only the last one may be shorter than day_max_span
    """
    if not 1 <= day_max_span <= DAY_MAX:
        raise ValueError(f"day_max_span must be between 1 and {DAY_MAX}, got {day_max_span}")

    total_days = days_in_month(year, month)
    windows = []
    for day in range(1, total_days + 1, day_max_span):
        span = min(day_max_span, total_days - day + 1)
        windows.append(RequestWindow(date(year, month, day), span))
    return windows


def month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def parse_month_key(value: str) -> Tuple[int, int]:
    """Parse "YYYY-MM" into (year, month)."""
    match = _MONTH_KEY.match(str(value).strip())
    if not match:
        raise ValueError(f"Month must be formatted YYYY-MM, got: {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in {value!r}")
    return year, month


def month_range(start: str, end: str) -> List[Tuple[int, int]]:
    """Every month from start to end inclusive, as (year, month) pairs."""
    year, month = parse_month_key(start)
    end_year, end_month = parse_month_key(end)

    months = []
    while (year, month) <= (end_year, end_month):
        months.append((year, month))
        month += 1
        if month > 12:
            month = 1
            year += 1
    return months


def parse_month_list(value: str) -> List[Tuple[int, int]]:
    """Parse a comma list such as "2001-04,2001-06"; order is preserved."""
    return [parse_month_key(part) for part in value.split(",") if part.strip()]
