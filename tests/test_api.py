"""Tests for the HTTP API."""

import inspect
from uuid import uuid4

from fastapi.testclient import TestClient

from diet_insights.api.app import create_app
from tests.conftest import FakeSpreadsheetReader, raw_record


def _upload(client: TestClient, filename: str = "diet.xlsx"):
    return client.post(
        "/datasets", files={"file": (filename, b"content", "application/octet-stream")}
    )


def test_health_endpoint(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_returns_dataset_summary(container) -> None:
    client = TestClient(create_app(container))

    response = _upload(client)

    assert response.status_code == 201
    data = response.json()
    assert data["filename"] == "diet.xlsx"
    assert data["row_count"] == 14
    assert data["detected_input_duration"] == 7
    assert data["min_date"] == "2024-01-01"
    assert data["max_date"] == "2024-01-07"
    assert data["default_target_duration"] == 7
    assert data["target_durations"] == [1, 7, 15, 30]
    assert data["filter_options"]["common_name"] == ["Chimpanzee"]
    assert data["meal_times"] == ["8:00 AM"]


def test_upload_rejects_invalid_diet_plan(container) -> None:
    reader = container.dataset_service.reader
    assert isinstance(reader, FakeSpreadsheetReader)
    reader.records = [raw_record(**{"Ingredient Qty": "lots"})]
    client = TestClient(create_app(container))

    response = _upload(client)

    assert response.status_code == 400
    assert "ingredient_qty" in response.json()["detail"]


def test_upload_rejects_oversized_files(container) -> None:
    container.settings.max_upload_bytes = 3
    client = TestClient(create_app(container))

    response = _upload(client)

    assert response.status_code == 413


def test_report_endpoint_returns_every_view(container) -> None:
    client = TestClient(create_app(container))
    dataset_id = _upload(client).json()["dataset_id"]

    response = client.get(f"/datasets/{dataset_id}/report")

    assert response.status_code == 200
    data = response.json()
    assert data["dataset_id"] == dataset_id
    assert data["actual_input_duration"] == 7
    assert data["target_output_duration"] == 7
    assert data["total_animals"] == 2
    (fruit,) = data["ingredient_totals"]["data"]
    assert fruit["group_name"] == "Fruit"
    assert fruit["overall_consuming_animals_count"] == 2
    assert fruit["animals_per_meal_time"] == {"8:00 AM": ["A1", "A2"]}
    assert fruit["ingredients"][0]["qty_per_day"] == 3.0
    assert "total_qty_per_day" not in fruit
    assert data["raw_materials"]["data"] == [
        {"ingredient_name": "Banana", "base_uom_name": "kg", "qty_per_day": 3.0}
    ]
    assert data["recipes"]["data"] == []


def test_report_endpoint_applies_query_filters(container) -> None:
    client = TestClient(create_app(container))
    dataset_id = _upload(client).json()["dataset_id"]

    response = client.get(
        f"/datasets/{dataset_id}/report",
        params={"species": "Gorilla", "time_range": "morning", "target_duration": 1},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filters"]["species_names"] == ["Gorilla"]
    assert data["filters"]["time_window"] == {"start_minutes": 360, "end_minutes": 720}
    assert data["filtered_row_count"] == 0
    assert data["ingredient_totals"]["data"] == []


def test_report_endpoint_rejects_bad_parameters(container) -> None:
    client = TestClient(create_app(container))
    dataset_id = _upload(client).json()["dataset_id"]

    bad_target = client.get(
        f"/datasets/{dataset_id}/report", params={"target_duration": 3}
    )
    bad_range = client.get(
        f"/datasets/{dataset_id}/report", params={"time_range": "midnight"}
    )
    half_window = client.get(
        f"/datasets/{dataset_id}/report", params={"start_minutes": 10}
    )

    assert bad_target.status_code == 422
    assert bad_range.status_code == 422
    assert half_window.status_code == 422


def test_filter_options_endpoint(container) -> None:
    client = TestClient(create_app(container))
    dataset_id = _upload(client).json()["dataset_id"]

    response = client.get(
        f"/datasets/{dataset_id}/filter-options", params={"site": "North Zoo"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filters"]["site_names"] == ["North Zoo"]
    assert data["filter_options"]["site_name"] == ["North Zoo"]
    assert data["filter_options"]["user_enclosure_name"] == ["Enclosure 1"]


def test_unknown_dataset_returns_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(f"/datasets/{uuid4()}/report")

    assert response.status_code == 404
    assert response.json() == {"detail": "Dataset not found."}


def test_parsing_and_report_endpoints_are_sync(container) -> None:
    app = create_app(container)
    endpoints = {
        (route.path, method): route.endpoint
        for route in app.routes
        for method in getattr(route, "methods", ())
    }

    for key in (
        ("/datasets", "POST"),
        ("/datasets/{dataset_id}/report", "GET"),
        ("/datasets/{dataset_id}/filter-options", "GET"),
    ):
        assert not inspect.iscoroutinefunction(endpoints[key])
