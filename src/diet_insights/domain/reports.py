"""Domain models for aggregated diet reports."""

from dataclasses import dataclass
from enum import StrEnum

from diet_insights.domain.filters import FilterState


class GroupKind(StrEnum):
    """Grouping pipelines producing a GroupedAggregate."""

    INGREDIENT_TYPE = "ingredient_type"
    RECIPE = "recipe"
    COMBO = "combo"
    CHOICE = "choice"


@dataclass(frozen=True)
class GlobalCounts:
    """Distinct animals and species in the filtered row set."""

    total_animals: int
    total_species: int


@dataclass(frozen=True)
class SpeciesConsumption:
    """Number of distinct animals of a species eating a group."""

    name: str
    animal_count: int


@dataclass(frozen=True)
class ConsumerBreakdown:
    """Who eats a group: animals, species with animal counts, enclosures."""

    animal_ids: tuple[str, ...]
    species: tuple[SpeciesConsumption, ...]
    enclosures: tuple[str, ...]

    @property
    def animals_count(self) -> int:
        return len(self.animal_ids)

    @property
    def enclosures_count(self) -> int:
        return len(self.enclosures)


@dataclass(frozen=True)
class GroupLineItem:
    """An ingredient line of a group with its quantity per meal time."""

    ingredient_name: str
    preparation_type_name: str
    cut_size_name: str
    base_uom_name: str
    quantities_by_meal_time: dict[str, float]
    qty_per_day: float
    qty_for_target_duration: float
    total_qty_for_target_duration_across_meal_times: float
    parent_consuming_animals_count: int


@dataclass(frozen=True)
class GroupedAggregate:
    """A named group of line items with per-meal-time consumer breakdowns."""

    kind: GroupKind
    group_name: str
    ingredients: list[GroupLineItem]
    total_quantities_for_target_duration: dict[str, float]
    overall: ConsumerBreakdown
    scheduled_meal_times: list[str]
    group_specific_meal_times: list[str]
    per_meal_time: dict[str, ConsumerBreakdown]
    base_uom_name: str | None = None
    total_qty_per_day: float | None = None
    total_qty_for_target_duration: float | None = None


@dataclass(frozen=True)
class AggregationResult:
    """Grouped aggregates plus the global counts of the filtered view."""

    data: list[GroupedAggregate]
    total_animals: int
    total_species: int


@dataclass(frozen=True)
class RawMaterialLine:
    """Per-day quantity of one ingredient in one unit of measure."""

    ingredient_name: str
    base_uom_name: str
    qty_per_day: float


@dataclass(frozen=True)
class RawMaterialResult:
    """Raw material lines plus the global counts of the filtered view."""

    data: list[RawMaterialLine]
    total_animals: int
    total_species: int


@dataclass(frozen=True)
class DietReport:
    """All report views for one filter state and duration."""

    filters: FilterState
    actual_input_duration: int
    target_output_duration: int
    counts: GlobalCounts
    filtered_row_count: int
    ingredient_totals: AggregationResult
    raw_materials: RawMaterialResult
    recipes: AggregationResult
    combos: AggregationResult
    choices: AggregationResult
