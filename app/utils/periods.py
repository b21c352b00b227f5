"""
Period resolution for time-windowed reports.

Month and year windows are calendar aligned, the week window is a rolling
seven days ending at the reference instant. Every window is inclusive on
both ends.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

DEFAULT_PERIOD = "month"


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: Optional[datetime] = None  # open-ended when None

    def contains(self, moment: datetime) -> bool:
        if moment < self.start:
            return False
        return self.end is None or moment <= self.end


@dataclass(frozen=True)
class PeriodRange:
    period: str
    current: DateWindow
    previous: DateWindow

    @property
    def current_start(self) -> datetime:
        return self.current.start

    @property
    def current_end(self) -> datetime:
        return self.current.end

    @property
    def previous_start(self) -> datetime:
        return self.previous.start

    @property
    def previous_end(self) -> datetime:
        return self.previous.end


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max)


def month_window(reference: datetime, offset: int = 0) -> DateWindow:
    first = add_months(reference.replace(day=1), offset)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return DateWindow(start_of_day(first), end_of_day(first.replace(day=last_day)))


def year_window(year: int) -> DateWindow:
    return DateWindow(datetime(year, 1, 1), datetime(year, 12, 31, 23, 59, 59, 999999))


def week_windows(reference: datetime) -> PeriodRange:
    current_start = reference - timedelta(days=7)
    previous_start = current_start - timedelta(days=7)
    return PeriodRange(
        "week",
        DateWindow(current_start, reference),
        DateWindow(previous_start, current_start),
    )


def resolve_period(period: Optional[str], reference: datetime) -> PeriodRange:
    """
    Resolve a named period into its current and previous windows.
    Unknown names resolve like 'month'.
    """
    if period == "week":
        return week_windows(reference)
    if period == "year":
        return PeriodRange(
            "year",
            year_window(reference.year),
            year_window(reference.year - 1),
        )
    return PeriodRange(
        "month",
        month_window(reference),
        month_window(reference, offset=-1),
    )


def months_ago(reference: datetime, months: int) -> datetime:
    return add_months(reference, -months)
