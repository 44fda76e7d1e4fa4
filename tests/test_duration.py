"""Tests for duration detection and scaling."""

import datetime as dt

import pytest

from diet_insights.services.duration import (
    DurationContext,
    detect_input_duration,
    resolve_target_duration,
)
from tests.conftest import make_row, weekly_banana_rows


def test_detects_weekly_input_from_seven_day_span() -> None:
    detection = detect_input_duration(weekly_banana_rows())

    assert detection.duration == 7
    assert detection.min_date == dt.date(2024, 1, 1)
    assert detection.max_date == dt.date(2024, 1, 7)


@pytest.mark.parametrize(("days", "expected"), [(1, 1), (2, 1), (6, 7), (8, 7), (9, 1)])
def test_detects_duration_from_inclusive_span(days: int, expected: int) -> None:
    rows = [
        make_row(date=dt.date(2024, 3, 1)),
        make_row(date=dt.date(2024, 3, 1) + dt.timedelta(days=days - 1)),
    ]

    assert detect_input_duration(rows).duration == expected


def test_unparseable_dates_fall_back_to_daily() -> None:
    detection = detect_input_duration([make_row(date="Week 1"), make_row(date=None)])

    assert detection.duration == 1
    assert detection.min_date is None
    assert detection.max_date is None


def test_scaling_passes_through_per_day_rate() -> None:
    context = DurationContext.create(7, 30)

    assert context.per_day(14) == 2
    assert context.for_target(14) == 60


def test_zero_input_duration_is_treated_as_one_day() -> None:
    context = DurationContext.create(0, 7)

    assert context.actual_input_duration == 1
    assert context.for_target(3) == 21


def test_rejects_unsupported_target_duration() -> None:
    with pytest.raises(ValueError, match="Unsupported target duration"):
        DurationContext.create(1, 3)


@pytest.mark.parametrize(
    ("detected", "current", "expected"),
    [
        (7, 1, 7),
        (7, 15, 15),
        (7, 4, 7),
        (1, 7, 1),
        (1, 30, 1),
        (1, 1, 1),
    ],
)
def test_resolve_target_duration(detected: int, current: int, expected: int) -> None:
    assert resolve_target_duration(detected, current) == expected
