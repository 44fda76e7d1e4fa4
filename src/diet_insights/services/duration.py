"""Planning period detection and duration scaling."""

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass

from diet_insights.domain.rows import DietLogRow

TARGET_DURATIONS = (1, 7, 15, 30)
DAILY = 1
WEEKLY = 7
_WEEKLY_SPAN_DAYS = range(6, 9)


@dataclass(frozen=True)
class DurationDetection:
    """Detected input period and the date range it was derived from."""

    duration: int
    min_date: dt.date | None
    max_date: dt.date | None


@dataclass(frozen=True)
class DurationContext:
    """Input period of the data and the period reports are scaled to."""

    actual_input_duration: int
    target_output_duration: int

    @classmethod
    def create(
        cls,
        actual_input_duration: int,
        target_output_duration: int,
        allowed_targets: Iterable[int] = TARGET_DURATIONS,
    ) -> "DurationContext":
        """Build a context, rejecting unsupported target durations."""
        if target_output_duration not in tuple(allowed_targets):
            raise ValueError(
                f"Unsupported target duration: {target_output_duration} days"
            )
        return cls(
            actual_input_duration=actual_input_duration or DAILY,
            target_output_duration=target_output_duration,
        )

    def per_day(self, raw_total: float) -> float:
        """Normalize a total over the input period to a per-day rate."""
        return raw_total / (self.actual_input_duration or DAILY)

    def for_target(self, raw_total: float) -> float:
        """Scale a total over the input period to the target period."""
        return self.per_day(raw_total) * self.target_output_duration


def detect_input_duration(rows: Iterable[DietLogRow]) -> DurationDetection:
    """Detect whether rows cover a 1-day or a 7-day planning cycle."""
    dates = [row.date for row in rows if isinstance(row.date, dt.date)]
    if not dates:
        return DurationDetection(duration=DAILY, min_date=None, max_date=None)
    min_date = min(dates)
    max_date = max(dates)
    span_days = (max_date - min_date).days + 1
    duration = WEEKLY if span_days in _WEEKLY_SPAN_DAYS else DAILY
    return DurationDetection(duration=duration, min_date=min_date, max_date=max_date)


def resolve_target_duration(
    detected_input_duration: int,
    current_target: int,
    allowed_targets: Iterable[int] = TARGET_DURATIONS,
) -> int:
    """Pick the target duration to show after a new input period is detected."""
    allowed = tuple(allowed_targets)
    if detected_input_duration == WEEKLY:
        if current_target == DAILY or current_target not in allowed:
            return WEEKLY
        return current_target
    if current_target > DAILY or current_target not in allowed:
        return DAILY
    return current_target
