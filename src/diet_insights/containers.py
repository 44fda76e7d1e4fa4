"""Dependency container wiring for the application."""

from dataclasses import dataclass

from diet_insights.adapters.spreadsheet_reader import PandasSpreadsheetReader
from diet_insights.config import Settings, parse_target_durations
from diet_insights.services.datasets import DatasetService, InMemoryDatasetStore
from diet_insights.services.reports import DietReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    dataset_service: DatasetService
    report_service: DietReportService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    dataset_service = DatasetService(
        reader=PandasSpreadsheetReader(),
        store=InMemoryDatasetStore(),
        ttl_seconds=resolved_settings.dataset_ttl_seconds,
    )
    report_service = DietReportService(
        allowed_target_durations=parse_target_durations(
            resolved_settings.allowed_target_durations
        ),
        default_target_duration=resolved_settings.default_target_duration,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        dataset_service=dataset_service,
        report_service=report_service,
    )
