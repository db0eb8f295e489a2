"""Shared validation utilities"""

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

WORK_HOURS_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$")


@dataclass(frozen=True)
class TimeWindow:
    """
    Daily working-hours window as a half-open local-time interval [start, end).

    The same window applies to every day; there is no per-weekday variation.
    """

    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError("Working hours start must be before end")

    def contains(self, start: datetime, end: datetime) -> bool:
        """
        Check whether the interval [start, end) fits inside the window on its day.

        The comparison is time-of-day only, so an interval ending on a later
        calendar day than it starts never fits.
        """
        if end.date() != start.date():
            return False
        if start.time() < self.start:
            return False
        if end.time() > self.end:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


def parse_working_hours(value: Optional[str]) -> TimeWindow:
    """
    Parse a working-hours string of the form "HH:MM-HH:MM" (24-hour, local).

    Args:
        value: Working hours string, e.g. "09:00-17:00"

    Returns:
        TimeWindow with parsed start and end

    Raises:
        ValueError: If the string is not exactly two valid time endpoints,
            or if start is not before end
    """
    if not value:
        raise ValueError("Working hours are required (format HH:MM-HH:MM)")

    match = WORK_HOURS_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid working hours '{value}' (format HH:MM-HH:MM)")

    start_hour, start_minute, end_hour, end_minute = (int(part) for part in match.groups())
    try:
        start = time(start_hour, start_minute)
        end = time(end_hour, end_minute)
    except ValueError:
        raise ValueError(f"Invalid working hours '{value}': time out of range")

    return TimeWindow(start=start, end=end)


def try_parse_working_hours(value: Optional[str]) -> Optional[TimeWindow]:
    """Parse working hours, returning None instead of raising on bad input"""
    try:
        return parse_working_hours(value)
    except ValueError:
        return None


def validate_required_text(value: Optional[str], field_name: str, max_length: int = 255) -> str:
    """
    Validate a required free-text field.

    Returns:
        The stripped value

    Raises:
        ValueError: If the value is empty or too long
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} must not be empty")

    value = str(value).strip()
    if len(value) > max_length:
        raise ValueError(f"{field_name} exceeds maximum length of {max_length} characters")

    return value
