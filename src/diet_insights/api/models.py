"""Pydantic models for API responses."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel


class DatasetSummary(BaseModel):
    """Uploaded dataset summary."""

    dataset_id: UUID
    filename: str
    row_count: int
    detected_input_duration: int
    min_date: date | None = None
    max_date: date | None = None
    default_target_duration: int
    target_durations: list[int]
    filter_options: dict[str, list[str]]
    meal_times: list[str]
