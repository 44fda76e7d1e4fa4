"""Domain models for diet plan rows."""

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NewType

RECIPE_TYPE = "recipe"
COMBO_TYPE = "combo"
CHOICE_TYPE = "ingredientwithchoice"
STRUCTURAL_TYPES = frozenset({RECIPE_TYPE, COMBO_TYPE, CHOICE_TYPE})


@dataclass(frozen=True)
class DietLogRow:
    """One line of a diet plan: an animal eating an ingredient at a meal time."""

    animal_id: str
    site_name: str
    common_name: str
    ingredient_name: str
    type: str
    ingredient_qty: float
    base_uom_name: str
    section_name: str = ""
    user_enclosure_name: str = ""
    class_name: str = ""
    type_name: str = ""
    preparation_type_name: str = ""
    cut_size_name: str = ""
    meal_time: str = ""
    date: dt.date | str | None = None
    wastage_qty: float = 0.0
    total_animal: float = 0.0
    extra: Mapping[str, str] = field(default_factory=dict, compare=False)

    @property
    def type_marker(self) -> str:
        """Lower-cased type used to detect recipe, combo and choice rows."""
        return self.type.lower()

    @property
    def is_structural(self) -> bool:
        """Whether the row belongs to a recipe, combo or choice group."""
        return self.type_marker in STRUCTURAL_TYPES


TEXT_FIELDS = frozenset(
    name
    for name in DietLogRow.__dataclass_fields__
    if name not in {"ingredient_qty", "wastage_qty", "total_animal", "date", "extra"}
)

OriginalRows = NewType("OriginalRows", tuple[DietLogRow, ...])
FilteredRows = NewType("FilteredRows", tuple[DietLogRow, ...])


@dataclass(frozen=True)
class ParsedDietLog:
    """Normalized rows plus the planning period detected from their dates."""

    rows: tuple[DietLogRow, ...]
    detected_input_duration: int
    min_date: dt.date | None
    max_date: dt.date | None

    @property
    def original_rows(self) -> OriginalRows:
        """Rows as the unfiltered set used for overall consumer counts."""
        return OriginalRows(self.rows)


class DietLogFormatError(ValueError):
    """Raised when an uploaded diet plan cannot be turned into rows."""
