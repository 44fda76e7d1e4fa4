"""Domain models for report filters."""

from dataclasses import dataclass

MINUTES_PER_DAY = 1440
LAST_MINUTE = MINUTES_PER_DAY - 1


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive minute-of-day window used to filter meal times."""

    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        for value in (self.start_minutes, self.end_minutes):
            if not 0 <= value <= LAST_MINUTE:
                raise ValueError(
                    f"Time window minutes must be within 0..{LAST_MINUTE}, got {value}"
                )


TIME_RANGE_PRESETS: dict[str, TimeWindow | None] = {
    "all": None,
    "early": TimeWindow(0, 360),
    "morning": TimeWindow(360, 720),
    "afternoon": TimeWindow(720, 1080),
    "evening": TimeWindow(1080, LAST_MINUTE),
}

FILTER_FIELDS: dict[str, str] = {
    "site_names": "site_name",
    "section_names": "section_name",
    "enclosure_names": "user_enclosure_name",
    "class_names": "class_name",
    "species_names": "common_name",
}


@dataclass(frozen=True)
class FilterState:
    """Active categorical selections plus an optional time-of-day window."""

    site_names: tuple[str, ...] = ()
    section_names: tuple[str, ...] = ()
    enclosure_names: tuple[str, ...] = ()
    class_names: tuple[str, ...] = ()
    species_names: tuple[str, ...] = ()
    time_window: TimeWindow | None = None

    def selections(self) -> dict[str, tuple[str, ...]]:
        """Return selected values keyed by the row field they restrict."""
        return {
            row_field: getattr(self, attribute)
            for attribute, row_field in FILTER_FIELDS.items()
        }


def time_window_for_preset(name: str) -> TimeWindow | None:
    """Resolve a named time-of-day range."""
    try:
        return TIME_RANGE_PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown time range: {name}") from None
