"""JSON serialization of report models."""

from diet_insights.domain.filters import FilterState
from diet_insights.domain.reports import (
    AggregationResult,
    ConsumerBreakdown,
    DietReport,
    GroupedAggregate,
    GroupLineItem,
    RawMaterialResult,
)


def serialize_report(report: DietReport) -> dict[str, object]:
    """Serialize every view of a diet report."""
    return {
        "filters": serialize_filters(report.filters),
        "actual_input_duration": report.actual_input_duration,
        "target_output_duration": report.target_output_duration,
        "total_animals": report.counts.total_animals,
        "total_species": report.counts.total_species,
        "filtered_row_count": report.filtered_row_count,
        "ingredient_totals": _serialize_result(report.ingredient_totals),
        "raw_materials": _serialize_raw_materials(report.raw_materials),
        "recipes": _serialize_result(report.recipes),
        "combos": _serialize_result(report.combos),
        "choices": _serialize_result(report.choices),
    }


def serialize_filters(filters: FilterState) -> dict[str, object]:
    """Serialize the active filter selections and time window."""
    window = filters.time_window
    return {
        "site_names": list(filters.site_names),
        "section_names": list(filters.section_names),
        "enclosure_names": list(filters.enclosure_names),
        "class_names": list(filters.class_names),
        "species_names": list(filters.species_names),
        "time_window": (
            {"start_minutes": window.start_minutes, "end_minutes": window.end_minutes}
            if window
            else None
        ),
    }


def _serialize_result(result: AggregationResult) -> dict[str, object]:
    return {
        "data": [_serialize_group(group) for group in result.data],
        "total_animals": result.total_animals,
        "total_species": result.total_species,
    }


def _serialize_raw_materials(result: RawMaterialResult) -> dict[str, object]:
    return {
        "data": [
            {
                "ingredient_name": line.ingredient_name,
                "base_uom_name": line.base_uom_name,
                "qty_per_day": line.qty_per_day,
            }
            for line in result.data
        ],
        "total_animals": result.total_animals,
        "total_species": result.total_species,
    }


def _serialize_group(group: GroupedAggregate) -> dict[str, object]:
    payload: dict[str, object] = {
        "kind": str(group.kind),
        "group_name": group.group_name,
        "ingredients": [_serialize_item(item) for item in group.ingredients],
        "total_quantities_for_target_duration": dict(
            group.total_quantities_for_target_duration
        ),
        "overall_consuming_animals_count": group.overall.animals_count,
        "overall_consuming_animal_ids": list(group.overall.animal_ids),
        "overall_consuming_species_details": _serialize_species(group.overall),
        "overall_consuming_enclosures": list(group.overall.enclosures),
        "overall_consuming_enclosures_count": group.overall.enclosures_count,
        "scheduled_meal_times": list(group.scheduled_meal_times),
        "group_specific_meal_times": list(group.group_specific_meal_times),
        "animals_per_meal_time": {
            meal_time: list(breakdown.animal_ids)
            for meal_time, breakdown in group.per_meal_time.items()
        },
        "species_details_per_meal_time": {
            meal_time: _serialize_species(breakdown)
            for meal_time, breakdown in group.per_meal_time.items()
        },
        "enclosures_per_meal_time": {
            meal_time: list(breakdown.enclosures)
            for meal_time, breakdown in group.per_meal_time.items()
        },
    }
    if group.base_uom_name is not None:
        payload["base_uom_name"] = group.base_uom_name
    if group.total_qty_per_day is not None:
        payload["total_qty_per_day"] = group.total_qty_per_day
        payload["total_qty_for_target_duration"] = group.total_qty_for_target_duration
    return payload


def _serialize_item(item: GroupLineItem) -> dict[str, object]:
    return {
        "ingredient_name": item.ingredient_name,
        "preparation_type_name": item.preparation_type_name,
        "cut_size_name": item.cut_size_name,
        "base_uom_name": item.base_uom_name,
        "quantities_by_meal_time": dict(item.quantities_by_meal_time),
        "qty_per_day": item.qty_per_day,
        "qty_for_target_duration": item.qty_for_target_duration,
        "total_qty_for_target_duration_across_meal_times": (
            item.total_qty_for_target_duration_across_meal_times
        ),
        "parent_consuming_animals_count": item.parent_consuming_animals_count,
    }


def _serialize_species(breakdown: ConsumerBreakdown) -> list[dict[str, object]]:
    return [
        {"name": species.name, "animal_count": species.animal_count}
        for species in breakdown.species
    ]
