"""Normalization of raw spreadsheet records into diet rows."""

import datetime as dt
import logging
import math
import re
from collections.abc import Mapping, Sequence

import pandas as pd

from diet_insights.domain.rows import (
    TEXT_FIELDS,
    DietLogFormatError,
    DietLogRow,
    ParsedDietLog,
)
from diet_insights.services.duration import detect_input_duration

REQUIRED_COLUMNS = (
    "site_name",
    "ingredient_name",
    "type",
    "ingredient_qty",
    "animal_id",
    "common_name",
    "base_uom_name",
    "date",
)
NUMERIC_COLUMNS = frozenset({"ingredient_qty", "wastage_qty", "total_animal"})

# Serial numbers above this are Excel dates after 1970-01-01.
_EXCEL_SERIAL_FLOOR = 25569
_EXCEL_EPOCH = dt.date(1899, 12, 30)

_logger = logging.getLogger(__name__)


def normalize_column_name(name: object) -> str:
    """Lower-case a header and join its words with underscores."""
    return re.sub(r"\s+", "_", str(name).strip().lower())


def normalize_records(
    records: Sequence[Mapping[str, object]],
) -> tuple[DietLogRow, ...]:
    """Coerce raw records into diet rows without validating required columns."""
    return tuple(_build_row(_normalize_columns(record)) for record in records)


def parse_diet_log(records: Sequence[Mapping[str, object]]) -> ParsedDietLog:
    """Validate and normalize raw records, then detect their planning period."""
    if not records:
        raise DietLogFormatError("Diet plan file is empty or has no data rows.")

    normalized = [_normalize_columns(record) for record in records]
    missing = _missing_required_columns(normalized[0])
    if missing:
        raise DietLogFormatError(
            "Missing, empty, or invalid required columns: "
            f"{', '.join(missing)}. Please ensure all required columns have data "
            "and 'ingredient_qty' is numeric."
        )

    rows = tuple(_build_row(values) for values in normalized)
    malformed = sum(
        1 for row in rows if not row.ingredient_name or not row.base_uom_name
    )
    if malformed:
        _logger.warning(
            "Diet log has %s rows without ingredient name or unit of measure",
            malformed,
        )
    negative = sum(1 for values in normalized if _is_negative(values))
    if negative:
        _logger.warning("Diet log has %s rows with negative quantities", negative)

    detection = detect_input_duration(rows)
    _logger.info(
        "Parsed diet log: rows=%s input_duration=%s dates=%s..%s",
        len(rows),
        detection.duration,
        detection.min_date,
        detection.max_date,
    )
    return ParsedDietLog(
        rows=rows,
        detected_input_duration=detection.duration,
        min_date=detection.min_date,
        max_date=detection.max_date,
    )


def _normalize_columns(record: Mapping[str, object]) -> dict[str, object]:
    return {normalize_column_name(key): value for key, value in record.items()}


def _build_row(values: dict[str, object]) -> DietLogRow:
    fields: dict[str, object] = {}
    extra: dict[str, str] = {}
    for name, value in values.items():
        if name in NUMERIC_COLUMNS:
            fields[name] = _to_quantity(value)
        elif name == "date":
            fields[name] = _to_date(value)
        elif name in TEXT_FIELDS:
            fields[name] = _to_text(value)
        else:
            extra[name] = _to_text(value)
    return DietLogRow(
        animal_id=str(fields.pop("animal_id", "")),
        site_name=str(fields.pop("site_name", "")),
        common_name=str(fields.pop("common_name", "")),
        ingredient_name=str(fields.pop("ingredient_name", "")),
        type=str(fields.pop("type", "")),
        ingredient_qty=float(fields.pop("ingredient_qty", 0.0)),
        base_uom_name=str(fields.pop("base_uom_name", "")),
        extra=extra,
        **fields,
    )


def _missing_required_columns(values: dict[str, object]) -> list[str]:
    missing = []
    for column in REQUIRED_COLUMNS:
        value = values.get(column)
        if column == "ingredient_qty":
            if _to_float(value) is None:
                missing.append(column)
        elif _is_blank(value):
            missing.append(column)
    return missing


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _is_negative(values: dict[str, object]) -> bool:
    quantity = _to_float(values.get("ingredient_qty"))
    return quantity is not None and quantity < 0


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _to_quantity(value: object) -> float:
    number = _to_float(value)
    if number is None or number < 0:
        return 0.0
    return number


def _to_text(value: object) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dt.datetime | dt.date):
        return value.isoformat()
    return str(value).strip()


def _to_date(value: object) -> dt.date | str | None:
    if _is_blank(value):
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        if value > _EXCEL_SERIAL_FLOOR:
            return _EXCEL_EPOCH + dt.timedelta(days=int(value))
        return str(value)
    text = str(value).strip()
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return text
    return parsed.date()
