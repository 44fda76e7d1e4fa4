"""Shared test fixtures."""

import datetime as dt
from dataclasses import dataclass, field

import pytest

from diet_insights.config import Settings
from diet_insights.containers import AppContainer
from diet_insights.domain.rows import DietLogRow
from diet_insights.services.datasets import DatasetService, InMemoryDatasetStore
from diet_insights.services.reports import DietReportService

WEEK_START = dt.date(2024, 1, 1)


def make_row(**overrides: object) -> DietLogRow:
    """Build a diet row with sensible defaults for tests."""
    values: dict[str, object] = {
        "animal_id": "A1",
        "site_name": "North Zoo",
        "section_name": "Primates",
        "user_enclosure_name": "Enclosure 1",
        "common_name": "Chimpanzee",
        "class_name": "Mammalia",
        "ingredient_name": "Banana",
        "type": "Fruit",
        "type_name": "",
        "preparation_type_name": "",
        "cut_size_name": "",
        "ingredient_qty": 1.0,
        "base_uom_name": "kg",
        "meal_time": "8:00 AM",
        "date": WEEK_START,
    }
    values.update(overrides)
    return DietLogRow(**values)


def weekly_banana_rows() -> list[DietLogRow]:
    """Two chimpanzees eating one banana each per day for a week."""
    return [
        make_row(
            animal_id=animal_id,
            ingredient_qty=1.0,
            date=WEEK_START + dt.timedelta(days=offset),
        )
        for animal_id in ("A1", "A2")
        for offset in range(7)
    ]


def raw_record(**overrides: object) -> dict[str, object]:
    """Build a raw spreadsheet record as the reader returns it."""
    record: dict[str, object] = {
        "Site Name": "North Zoo",
        "Section Name": "Primates",
        "User Enclosure Name": "Enclosure 1",
        "Animal Id": "A1",
        "Common Name": "Chimpanzee",
        "Class Name": "Mammalia",
        "Ingredient Name": "Banana",
        "Type": "Fruit",
        "Type Name": "",
        "Meal Time": "8:00 AM",
        "Ingredient Qty": "1.5",
        "Base UOM Name": "kg",
        "Date": "2024-01-01",
    }
    record.update(overrides)
    return record


@dataclass
class FakeSpreadsheetReader:
    """Fake reader returning fixed records."""

    records: list[dict[str, object]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def read(self, content: bytes, filename: str) -> list[dict[str, object]]:
        self.calls.append(filename)
        return [dict(record) for record in self.records]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        default_target_duration=1,
        allowed_target_durations="1,7,15,30",
        dataset_ttl_seconds=60,
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture
def spreadsheet_reader() -> FakeSpreadsheetReader:
    return FakeSpreadsheetReader(
        records=[
            raw_record(**{"Animal Id": animal_id, "Date": f"2024-01-0{day}"})
            for animal_id in ("A1", "A2")
            for day in range(1, 8)
        ]
    )


@pytest.fixture
def container(
    settings: Settings, spreadsheet_reader: FakeSpreadsheetReader
) -> AppContainer:
    return AppContainer(
        settings=settings,
        dataset_service=DatasetService(
            reader=spreadsheet_reader,
            store=InMemoryDatasetStore(),
            ttl_seconds=settings.dataset_ttl_seconds,
        ),
        report_service=DietReportService(),
    )
