"""Parsing of free-text meal times into minutes of the day."""

import re

from diet_insights.domain.filters import LAST_MINUTE, TimeWindow

_TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(AM|PM)$")
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_RANGE_SEPARATOR = re.compile(r"\s*-\s*")

NOON_HOUR = 12
LAST_HOUR = 23
LAST_MINUTE_OF_HOUR = 59


def parse_time_to_minutes(text: str | None) -> int | None:
    """Parse `H:MM AM/PM` or `H:MM[:SS]` into minutes after midnight.

    Returns None for anything that is not a valid clock time.
    """
    if not text or not isinstance(text, str):
        return None
    normalized = re.sub(r"\s+", "", text).upper()

    match = _TWELVE_HOUR.match(normalized)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2))
        if not 1 <= hours <= NOON_HOUR or minutes > LAST_MINUTE_OF_HOUR:
            return None
        if match.group(3) == "PM" and hours != NOON_HOUR:
            hours += NOON_HOUR
        if match.group(3) == "AM" and hours == NOON_HOUR:
            hours = 0
        return hours * 60 + minutes

    match = _TWENTY_FOUR_HOUR.match(normalized)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2))
        if hours > LAST_HOUR or minutes > LAST_MINUTE_OF_HOUR:
            return None
        return hours * 60 + minutes
    return None


def parse_meal_time_range(text: str | None) -> tuple[int, int] | None:
    """Parse a single meal time or an `A - B` range into (start, end) minutes.

    A single time is returned as a point range. A range may wrap past
    midnight, in which case start is greater than end.
    """
    if not text or not isinstance(text, str):
        return None
    parts = [part.strip() for part in _RANGE_SEPARATOR.split(text.strip())]
    if len(parts) == 2:  # noqa: PLR2004
        start = parse_time_to_minutes(parts[0])
        end = parse_time_to_minutes(parts[1])
        if start is not None and end is not None:
            return start, end
        return None
    if len(parts) == 1 and parts[0]:
        point = parse_time_to_minutes(parts[0])
        if point is not None:
            return point, point
    return None


def overlaps_window(meal_time: str | None, window: TimeWindow) -> bool:
    """Return whether a meal time falls inside (or overlaps) the window."""
    parsed = parse_meal_time_range(meal_time)
    if parsed is None:
        return False
    start, end = parsed
    if start <= end:
        return start <= window.end_minutes and window.start_minutes <= end
    overlaps_late_part = (
        start <= window.end_minutes and window.start_minutes <= LAST_MINUTE
    )
    overlaps_early_part = window.start_minutes <= end
    return overlaps_late_part or overlaps_early_part
