"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import (
    Depends,
    FastAPI,
    File,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)

from diet_insights.api.models import DatasetSummary
from diet_insights.api.serializers import serialize_filters, serialize_report
from diet_insights.app_logging import configure_logging
from diet_insights.containers import AppContainer
from diet_insights.domain.filters import (
    FILTER_FIELDS,
    FilterState,
    TimeWindow,
    time_window_for_preset,
)
from diet_insights.domain.rows import DietLogFormatError
from diet_insights.services.datasets import DatasetRecord
from diet_insights.services.filters import get_unique_values

_UNPROCESSABLE = 422
_CONTENT_TOO_LARGE = 413


def filter_state_from_query(  # noqa: PLR0913
    site: list[str] = Query(default=[]),
    section: list[str] = Query(default=[]),
    enclosure: list[str] = Query(default=[]),
    class_name: list[str] = Query(default=[]),
    species: list[str] = Query(default=[]),
    time_range: str | None = None,
    start_minutes: int | None = None,
    end_minutes: int | None = None,
) -> FilterState:
    """Build a filter state from repeated query parameters."""
    try:
        window = _time_window(time_range, start_minutes, end_minutes)
    except ValueError as exc:
        raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc
    return FilterState(
        site_names=tuple(site),
        section_names=tuple(section),
        enclosure_names=tuple(enclosure),
        class_names=tuple(class_name),
        species_names=tuple(species),
        time_window=window,
    )


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Diet Insights")
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/datasets", status_code=status.HTTP_201_CREATED)
    def upload_dataset(
        request: Request, file: UploadFile = File(...)
    ) -> DatasetSummary:
        """Parse an uploaded diet plan and keep it for this session."""
        state_container: AppContainer = request.app.state.container
        content = file.file.read()
        if len(content) > state_container.settings.max_upload_bytes:
            raise HTTPException(
                status_code=_CONTENT_TOO_LARGE,
                detail="Diet plan file is too large.",
            )
        filename = file.filename or "upload.xlsx"
        try:
            record = state_container.dataset_service.load(content, filename)
        except DietLogFormatError as exc:
            logger.warning("Rejected diet plan %s: %s", filename, exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return _dataset_summary(state_container, record)

    @app.get("/datasets/{dataset_id}/filter-options")
    def filter_options(
        dataset_id: UUID,
        request: Request,
        filters: FilterState = Depends(filter_state_from_query),
    ) -> dict[str, object]:
        """Return the values still selectable for each filter field."""
        state_container: AppContainer = request.app.state.container
        record = _require_dataset(state_container, dataset_id)
        return {
            "filters": serialize_filters(filters),
            "filter_options": state_container.report_service.filter_options(
                record.log, filters
            ),
        }

    @app.get("/datasets/{dataset_id}/report")
    def report(
        dataset_id: UUID,
        request: Request,
        filters: FilterState = Depends(filter_state_from_query),
        target_duration: int | None = None,
    ) -> dict[str, object]:
        """Return every aggregated view for the current filters."""
        state_container: AppContainer = request.app.state.container
        record = _require_dataset(state_container, dataset_id)
        try:
            diet_report = state_container.report_service.build_report(
                record.log, filters, target_duration
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        return {"dataset_id": str(dataset_id), **serialize_report(diet_report)}

    return app


def _require_dataset(container: AppContainer, dataset_id: UUID) -> DatasetRecord:
    record = container.dataset_service.get(dataset_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Dataset not found."
        )
    return record


def _dataset_summary(container: AppContainer, record: DatasetRecord) -> DatasetSummary:
    log = record.log
    report_service = container.report_service
    return DatasetSummary(
        dataset_id=record.id,
        filename=record.filename,
        row_count=len(log.rows),
        detected_input_duration=log.detected_input_duration,
        min_date=log.min_date,
        max_date=log.max_date,
        default_target_duration=report_service.default_target_for(log),
        target_durations=list(report_service.target_durations()),
        filter_options={
            row_field: get_unique_values(log.rows, row_field)
            for row_field in FILTER_FIELDS.values()
        },
        meal_times=get_unique_values(log.rows, "meal_time"),
    )


def _time_window(
    time_range: str | None, start_minutes: int | None, end_minutes: int | None
) -> TimeWindow | None:
    if start_minutes is not None or end_minutes is not None:
        if start_minutes is None or end_minutes is None:
            raise ValueError("Both start_minutes and end_minutes are required.")
        return TimeWindow(start_minutes, end_minutes)
    if time_range:
        return time_window_for_preset(time_range)
    return None
