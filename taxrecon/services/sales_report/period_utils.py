"""Reporting period validation and month boundary calculation."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from taxrecon.core.clock import Clock, system_clock
from taxrecon.core.exceptions import InvalidPeriodError

MIN_YEAR = 2014
MAX_YEAR = 3200


@dataclass(frozen=True)
class ReportingPeriod:
    """A calendar month. Construction fails instead of clamping bad values."""

    month: int
    year: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True/False are never meaningful months
        for value in (self.month, self.year):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidPeriodError(self.month, self.year, "Month and year must be integers")
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(self.month, self.year, f"Invalid month: {self.month}. Must be 1-12")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InvalidPeriodError(
                self.month, self.year, f"Invalid year: {self.year}. Must be {MIN_YEAR}-{MAX_YEAR}"
            )

    @property
    def start(self) -> datetime:
        """First instant of the month, UTC (inclusive)."""
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    @property
    def end(self) -> datetime:
        """First instant of the following month, UTC (exclusive)."""
        if self.month == 12:
            return datetime(self.year + 1, 1, 1, tzinfo=timezone.utc)
        return datetime(self.year, self.month + 1, 1, tzinfo=timezone.utc)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def contains(self, instant: datetime) -> bool:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return self.start <= instant < self.end


def previous_month(now: datetime) -> tuple[int, int]:
    """Return (month, year) of the calendar month before ``now``."""
    if now.month == 1:
        return 12, now.year - 1
    return now.month - 1, now.year


def resolve_period(
    month: Optional[int] = None,
    year: Optional[int] = None,
    clock: Clock = system_clock,
) -> ReportingPeriod:
    """Build the reporting period from explicit values or default to last month.

    Args:
        month: 1-12, or None to use the previous calendar month
        year: 2014-3200, or None to use the previous calendar month's year

    Raises:
        InvalidPeriodError: If the (possibly defaulted) values are out of range
    """
    if month is None or year is None:
        default_month, default_year = previous_month(clock.now())
        if month is None:
            month = default_month
        if year is None:
            year = default_year
    return ReportingPeriod(month=month, year=year)
