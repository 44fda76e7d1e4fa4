"""Tests for meal time parsing."""

import pytest

from diet_insights.domain.filters import TimeWindow
from diet_insights.services.meal_times import (
    overlaps_window,
    parse_meal_time_range,
    parse_time_to_minutes,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("8:00 AM", 480),
        ("8:00am", 480),
        (" 12:00 AM ", 0),
        ("12:30 PM", 750),
        ("11:59 PM", 1439),
        ("08:15", 495),
        ("23:59:59", 1439),
        ("0:00", 0),
    ],
)
def test_parse_time_to_minutes_accepts_clock_times(text: str, expected: int) -> None:
    assert parse_time_to_minutes(text) == expected


@pytest.mark.parametrize(
    "text", ["25:00", "13:00 PM", "0:30 AM", "8:60", "noon", "", None, "8"]
)
def test_parse_time_to_minutes_rejects_invalid(text: str | None) -> None:
    assert parse_time_to_minutes(text) is None


def test_parse_meal_time_range_handles_points_and_ranges() -> None:
    assert parse_meal_time_range("9:00 AM") == (540, 540)
    assert parse_meal_time_range("9:00 AM - 10:30 AM") == (540, 630)
    assert parse_meal_time_range("22:00-02:00") == (1320, 120)
    assert parse_meal_time_range("9:00 AM - later") is None


def test_overlaps_window_is_inclusive() -> None:
    window = TimeWindow(360, 720)

    assert overlaps_window("6:00 AM", window)
    assert overlaps_window("12:00 PM", window)
    assert not overlaps_window("12:01 PM", window)
    assert not overlaps_window("25:00", window)
    assert not overlaps_window("", window)


def test_overlaps_window_checks_wrapping_ranges() -> None:
    assert overlaps_window("22:00 - 02:00", TimeWindow(0, 360))
    assert overlaps_window("22:00 - 02:00", TimeWindow(1080, 1439))
    assert not overlaps_window("22:00 - 02:00", TimeWindow(360, 720))
