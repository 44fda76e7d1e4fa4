"""Aggregation of diet rows into grouped report views.

Every grouping pipeline reads two row sets:

* the original, unfiltered rows, which decide who eats a group overall and
  which meal times form the group's columns;
* the globally filtered rows, which drive every quantity.

Quantities are always scaled through a per-day rate, so views built from
1-day and 7-day inputs stay comparable.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from diet_insights.domain.reports import (
    AggregationResult,
    ConsumerBreakdown,
    GlobalCounts,
    GroupedAggregate,
    GroupKind,
    GroupLineItem,
    RawMaterialLine,
    RawMaterialResult,
    SpeciesConsumption,
)
from diet_insights.domain.rows import (
    CHOICE_TYPE,
    COMBO_TYPE,
    RECIPE_TYPE,
    DietLogRow,
    FilteredRows,
    OriginalRows,
)
from diet_insights.services.duration import DAILY, DurationContext

INGREDIENT_TYPE_PRECISION = 2
GROUP_PRECISION = 4
RAW_MATERIAL_PRECISION = 2
UNKNOWN_UOM = "N/A"

_ItemKey = tuple[str, str, str, str]


@dataclass(frozen=True)
class GroupingRule:
    """How one pipeline selects rows, names groups and rounds quantities."""

    kind: GroupKind
    matches: Callable[[DietLogRow], bool]
    group_key: Callable[[DietLogRow], str]
    precision: int
    representative_uom: bool = False
    recipe_totals: bool = False


def _is_plain_ingredient(row: DietLogRow) -> bool:
    return not row.is_structural


def _marker_matcher(marker: str) -> Callable[[DietLogRow], bool]:
    def matches(row: DietLogRow) -> bool:
        return row.type_marker == marker

    return matches


def _type_name_or(default: str) -> Callable[[DietLogRow], str]:
    def group_key(row: DietLogRow) -> str:
        return row.type_name or default

    return group_key


def _ingredient_type_key(row: DietLogRow) -> str:
    return row.type or "Unknown Type"


INGREDIENT_TYPE_RULE = GroupingRule(
    kind=GroupKind.INGREDIENT_TYPE,
    matches=_is_plain_ingredient,
    group_key=_ingredient_type_key,
    precision=INGREDIENT_TYPE_PRECISION,
)
RECIPE_RULE = GroupingRule(
    kind=GroupKind.RECIPE,
    matches=_marker_matcher(RECIPE_TYPE),
    group_key=_type_name_or("Unknown Recipe"),
    precision=GROUP_PRECISION,
    representative_uom=True,
    recipe_totals=True,
)
COMBO_RULE = GroupingRule(
    kind=GroupKind.COMBO,
    matches=_marker_matcher(COMBO_TYPE),
    group_key=_type_name_or("Default Combo Group"),
    precision=GROUP_PRECISION,
    representative_uom=True,
)
CHOICE_RULE = GroupingRule(
    kind=GroupKind.CHOICE,
    matches=_marker_matcher(CHOICE_TYPE),
    group_key=_type_name_or("Default Choice Group"),
    precision=GROUP_PRECISION,
    representative_uom=True,
)


def process_overall_ingredient_totals(
    original_rows: OriginalRows,
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    actual_input_duration: int = DAILY,
    target_output_duration: int = DAILY,
) -> AggregationResult:
    """Group plain ingredients by their ingredient type."""
    duration = _duration(actual_input_duration, target_output_duration)
    return aggregate_groups(
        INGREDIENT_TYPE_RULE, original_rows, filtered_rows, global_counts, duration
    )


def process_recipe_data(
    original_rows: OriginalRows,
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    actual_input_duration: int = DAILY,
    target_output_duration: int = DAILY,
) -> AggregationResult:
    """Group recipe rows by recipe name, with whole-recipe totals."""
    duration = _duration(actual_input_duration, target_output_duration)
    return aggregate_groups(
        RECIPE_RULE, original_rows, filtered_rows, global_counts, duration
    )


def process_combo_ingredient_usage(
    original_rows: OriginalRows,
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    actual_input_duration: int = DAILY,
    target_output_duration: int = DAILY,
) -> AggregationResult:
    """Group combo rows by combo group name."""
    duration = _duration(actual_input_duration, target_output_duration)
    return aggregate_groups(
        COMBO_RULE, original_rows, filtered_rows, global_counts, duration
    )


def process_choice_ingredient_usage(
    original_rows: OriginalRows,
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    actual_input_duration: int = DAILY,
    target_output_duration: int = DAILY,
) -> AggregationResult:
    """Group ingredient-with-choice rows by choice group name."""
    duration = _duration(actual_input_duration, target_output_duration)
    return aggregate_groups(
        CHOICE_RULE, original_rows, filtered_rows, global_counts, duration
    )


def process_detailed_raw_material_totals(
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    actual_input_duration: int = DAILY,
) -> RawMaterialResult:
    """Sum filtered quantities per ingredient and unit as a per-day rate.

    Choice rows are left out since only one of their alternatives is fed.
    """
    duration = _duration(actual_input_duration, DAILY)
    totals: dict[tuple[str, str], float] = {}
    for row in filtered_rows:
        if row.type_marker == CHOICE_TYPE:
            continue
        key = (row.ingredient_name, row.base_uom_name)
        totals[key] = totals.get(key, 0.0) + row.ingredient_qty

    lines = [
        RawMaterialLine(
            ingredient_name=ingredient_name,
            base_uom_name=base_uom_name,
            qty_per_day=round_quantity(
                duration.per_day(total), RAW_MATERIAL_PRECISION
            ),
        )
        for (ingredient_name, base_uom_name), total in totals.items()
    ]
    return RawMaterialResult(
        data=sorted(lines, key=lambda line: line.ingredient_name),
        total_animals=global_counts.total_animals,
        total_species=global_counts.total_species,
    )


def aggregate_groups(
    rule: GroupingRule,
    original_rows: OriginalRows,
    filtered_rows: FilteredRows,
    global_counts: GlobalCounts,
    duration: DurationContext,
) -> AggregationResult:
    """Run the shared grouping algorithm for one pipeline."""
    filtered_by_group = _rows_by_group(rule, filtered_rows)
    original_by_group = _rows_by_group(rule, original_rows)
    groups = [
        _build_group(
            rule,
            group_name,
            filtered_by_group[group_name],
            original_by_group.get(group_name, []),
            duration,
        )
        for group_name in sorted(filtered_by_group)
    ]
    return AggregationResult(
        data=groups,
        total_animals=global_counts.total_animals,
        total_species=global_counts.total_species,
    )


def consumer_breakdown(rows: Iterable[DietLogRow]) -> ConsumerBreakdown:
    """Collect distinct animals, species with animal counts and enclosures."""
    animal_ids: set[str] = set()
    species: dict[str, set[str]] = {}
    enclosures: set[str] = set()
    for row in rows:
        if row.animal_id:
            animal_ids.add(row.animal_id)
            if row.common_name:
                species.setdefault(row.common_name, set()).add(row.animal_id)
        if row.user_enclosure_name:
            enclosures.add(row.user_enclosure_name)
    return ConsumerBreakdown(
        animal_ids=tuple(sorted(animal_ids)),
        species=tuple(
            SpeciesConsumption(name=name, animal_count=len(ids))
            for name, ids in sorted(species.items())
        ),
        enclosures=tuple(sorted(enclosures)),
    )


def meal_time_axis(rows: Iterable[DietLogRow]) -> list[str]:
    """Return the sorted distinct trimmed meal times, skipping blanks."""
    return sorted({meal_time for row in rows if (meal_time := row.meal_time.strip())})


def round_quantity(value: float, precision: int) -> float:
    """Round half away from zero on the exact binary value."""
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _duration(actual: int, target: int) -> DurationContext:
    # Targets are validated by the caller against its configured durations.
    return DurationContext(
        actual_input_duration=actual or DAILY, target_output_duration=target
    )


def _rows_by_group(
    rule: GroupingRule, rows: Iterable[DietLogRow]
) -> dict[str, list[DietLogRow]]:
    grouped: dict[str, list[DietLogRow]] = {}
    for row in rows:
        if rule.matches(row):
            grouped.setdefault(rule.group_key(row), []).append(row)
    return grouped


def _build_group(
    rule: GroupingRule,
    group_name: str,
    filtered_rows: Sequence[DietLogRow],
    original_rows: Sequence[DietLogRow],
    duration: DurationContext,
) -> GroupedAggregate:
    overall = consumer_breakdown(original_rows)
    axis = meal_time_axis(original_rows)
    sums = _sum_by_item_and_meal_time(filtered_rows)

    items: list[GroupLineItem] = []
    raw_group_total = 0.0
    for key, meal_sums in sums.items():
        item, raw_item_total = _build_item(
            key, meal_sums, axis, duration, rule.precision, overall.animals_count
        )
        items.append(item)
        raw_group_total += raw_item_total
    items.sort(key=lambda item: item.ingredient_name)

    original_by_meal_time: dict[str, list[DietLogRow]] = {}
    for row in original_rows:
        original_by_meal_time.setdefault(row.meal_time.strip(), []).append(row)
    per_meal_time = {
        meal_time: consumer_breakdown(original_by_meal_time.get(meal_time, []))
        for meal_time in axis
    }

    return GroupedAggregate(
        kind=rule.kind,
        group_name=group_name,
        ingredients=items,
        total_quantities_for_target_duration=_uom_totals(items, rule.precision),
        overall=overall,
        scheduled_meal_times=list(axis),
        group_specific_meal_times=list(axis),
        per_meal_time=per_meal_time,
        base_uom_name=(
            _representative_uom(items, original_rows)
            if rule.representative_uom
            else None
        ),
        total_qty_per_day=(
            round_quantity(duration.per_day(raw_group_total), rule.precision)
            if rule.recipe_totals
            else None
        ),
        total_qty_for_target_duration=(
            round_quantity(duration.for_target(raw_group_total), rule.precision)
            if rule.recipe_totals
            else None
        ),
    )


def _item_key(row: DietLogRow) -> _ItemKey:
    return (
        row.ingredient_name,
        row.preparation_type_name,
        row.cut_size_name,
        row.base_uom_name,
    )


def _sum_by_item_and_meal_time(
    rows: Iterable[DietLogRow],
) -> dict[_ItemKey, dict[str, float]]:
    sums: dict[_ItemKey, dict[str, float]] = {}
    for row in rows:
        meal_sums = sums.setdefault(_item_key(row), {})
        meal_time = row.meal_time.strip()
        meal_sums[meal_time] = meal_sums.get(meal_time, 0.0) + row.ingredient_qty
    return sums


def _build_item(  # noqa: PLR0913
    key: _ItemKey,
    meal_sums: dict[str, float],
    axis: Sequence[str],
    duration: DurationContext,
    precision: int,
    parent_consuming_animals_count: int,
) -> tuple[GroupLineItem, float]:
    quantities: dict[str, float] = {}
    raw_total = 0.0
    target_total = 0.0
    for meal_time in axis:
        raw = meal_sums.get(meal_time, 0.0)
        scaled = duration.for_target(raw)
        quantities[meal_time] = round_quantity(scaled, precision)
        raw_total += raw
        target_total += scaled

    ingredient_name, preparation_type_name, cut_size_name, base_uom_name = key
    item = GroupLineItem(
        ingredient_name=ingredient_name,
        preparation_type_name=preparation_type_name,
        cut_size_name=cut_size_name,
        base_uom_name=base_uom_name,
        quantities_by_meal_time=quantities,
        qty_per_day=round_quantity(duration.per_day(raw_total), precision),
        qty_for_target_duration=round_quantity(
            duration.for_target(raw_total), precision
        ),
        total_qty_for_target_duration_across_meal_times=round_quantity(
            target_total, precision
        ),
        parent_consuming_animals_count=parent_consuming_animals_count,
    )
    return item, raw_total


def _uom_totals(items: Iterable[GroupLineItem], precision: int) -> dict[str, float]:
    totals: dict[str, float] = {}
    for item in items:
        for quantity in item.quantities_by_meal_time.values():
            totals[item.base_uom_name] = totals.get(item.base_uom_name, 0.0) + quantity
    return {uom: round_quantity(total, precision) for uom, total in totals.items()}


def _representative_uom(
    items: Sequence[GroupLineItem], original_rows: Sequence[DietLogRow]
) -> str:
    if not items:
        if original_rows and original_rows[0].base_uom_name:
            return original_rows[0].base_uom_name
        return UNKNOWN_UOM
    counts = Counter(item.base_uom_name for item in items)
    return counts.most_common(1)[0][0]
