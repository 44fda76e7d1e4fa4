"""Filtering of diet rows and filter-option discovery."""

from collections.abc import Iterable, Sequence

from diet_insights.domain.filters import FILTER_FIELDS, FilterState, TimeWindow
from diet_insights.domain.reports import GlobalCounts
from diet_insights.domain.rows import TEXT_FIELDS, DietLogRow, FilteredRows
from diet_insights.services.meal_times import overlaps_window


def apply_global_filters(
    rows: Iterable[DietLogRow], filters: FilterState
) -> FilteredRows:
    """Return rows matching every active categorical filter and the time window."""
    return FilteredRows(
        tuple(_filter_rows(rows, filters.selections(), filters.time_window))
    )


def get_global_counts(rows: Iterable[DietLogRow]) -> GlobalCounts:
    """Count distinct animals and species in a row set."""
    animals: set[str] = set()
    species: set[str] = set()
    for row in rows:
        if row.animal_id:
            animals.add(row.animal_id)
        if row.common_name:
            species.add(row.common_name)
    return GlobalCounts(total_animals=len(animals), total_species=len(species))


def get_unique_values(rows: Iterable[DietLogRow], field: str) -> list[str]:
    """Return sorted distinct non-blank values of a row field."""
    _ensure_row_field(field)
    return sorted({value for row in rows if (value := getattr(row, field))})


def get_dynamic_unique_filter_options(
    all_rows: Sequence[DietLogRow], target_field: str, filters: FilterState
) -> list[str]:
    """Return the values of `target_field` still selectable under the other filters.

    The filter governing `target_field` itself is ignored so that a selection
    never hides its own alternatives. The time window always applies.
    """
    _ensure_row_field(target_field)
    selections = {
        row_field: selected
        for row_field, selected in filters.selections().items()
        if row_field != target_field
    }
    remaining = _filter_rows(all_rows, selections, filters.time_window)
    return sorted({value for row in remaining if (value := getattr(row, target_field))})


def get_all_dynamic_filter_options(
    all_rows: Sequence[DietLogRow], filters: FilterState
) -> dict[str, list[str]]:
    """Return dynamic options for every filterable field."""
    return {
        row_field: get_dynamic_unique_filter_options(all_rows, row_field, filters)
        for row_field in FILTER_FIELDS.values()
    }


def _filter_rows(
    rows: Iterable[DietLogRow],
    selections: dict[str, tuple[str, ...]],
    time_window: TimeWindow | None,
) -> Iterable[DietLogRow]:
    active = {field: set(values) for field, values in selections.items() if values}
    for row in rows:
        if not _matches_selections(row, active):
            continue
        if time_window is not None and not overlaps_window(row.meal_time, time_window):
            continue
        yield row


def _matches_selections(row: DietLogRow, active: dict[str, set[str]]) -> bool:
    for field, allowed in active.items():
        value = getattr(row, field)
        if not value or value not in allowed:
            return False
    return True


def _ensure_row_field(field: str) -> None:
    if field not in TEXT_FIELDS:
        raise ValueError(f"Unknown diet row text field: {field}")
