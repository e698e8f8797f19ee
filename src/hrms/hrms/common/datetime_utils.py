from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import InvalidRange, ValidationError

_WEEKEND = {calendar.SATURDAY, calendar.SUNDAY}


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_month(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Invalid month (YYYY-MM): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_between_inclusive(start: date, end: date) -> int:
    if end < start:
        raise InvalidRange("End date must be on or after start date")
    return (end - start).days + 1


@dataclass(frozen=True)
class DateSpan:
    """Inclusive, ascending run of dates. Iterating twice yields the same dates."""

    start: date
    end: date

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, value: object) -> bool:
        return isinstance(value, date) and self.start <= value <= self.end


def enumerate_dates(start: date, end: date) -> DateSpan:
    if end < start:
        raise InvalidRange("End date must be on or after start date")
    return DateSpan(start, end)


def month_bounds(month_ref: date) -> tuple[date, date]:
    first = month_ref.replace(day=1)
    last_day = calendar.monthrange(month_ref.year, month_ref.month)[1]
    return first, month_ref.replace(day=last_day)


def working_days_in_month(month_ref: date) -> int:
    """Weekdays (Mon-Fri) in the month containing `month_ref`. No holiday calendar."""
    first, last = month_bounds(month_ref)
    return sum(1 for d in DateSpan(first, last) if d.weekday() not in _WEEKEND)


def shift_month(month_ref: date, delta: int) -> date:
    """First day of the month `delta` months away from `month_ref`."""
    index = month_ref.year * 12 + (month_ref.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def trailing_months(today: date, count: int) -> list[date]:
    """First days of the last `count` months, oldest first, ending with today's month."""
    return [shift_month(today, -offset) for offset in range(count - 1, -1, -1)]
