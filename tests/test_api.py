"""Tests for the FastAPI app: visualize, parse and sample endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_visualize(client: TestClient, legacy_document: str) -> None:
    response = client.post("/api/visualize", json={"text": legacy_document})

    assert response.status_code == 200
    payload = response.json()
    assert [(n["id"], n["layer"]) for n in payload["nodes"]] == [
        ("initial", 0),
        ("pending", 1),
        ("done", 2),
    ]
    assert len(payload["edges"]) == 2
    assert payload["metadata"]["processId"] == "simple"
    assert payload["metadata"]["format"] == "v2"


def test_visualize_spacing_override(client: TestClient, legacy_document: str) -> None:
    response = client.post(
        "/api/visualize",
        json={"text": legacy_document, "rowHeight": 10, "spacingX": 5},
    )
    assert response.status_code == 200
    done = next(n for n in response.json()["nodes"] if n["id"] == "done")
    assert done["y"] == 20


def test_visualize_syntax_error(client: TestClient) -> None:
    response = client.post("/api/visualize", json={"text": "{:format :v3"})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["kind"] == "SyntaxError"
    assert detail["position"] == 12
    assert "Missing closing" in detail["message"]


def test_visualize_schema_error(client: TestClient) -> None:
    response = client.post(
        "/api/visualize",
        json={"text": "{:format :v3 :transitions [{:name :t :from :a}]}"},
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["kind"] == "SchemaError"
    assert detail["key"] == "to"


def test_visualize_empty_text(client: TestClient) -> None:
    response = client.post("/api/visualize", json={"text": "   "})
    assert response.status_code == 400


def test_visualize_missing_body_field(client: TestClient) -> None:
    response = client.post("/api/visualize", json={})
    assert response.status_code == 422


def test_parse(client: TestClient, modern_document: str) -> None:
    response = client.post("/api/parse", json={"text": modern_document})

    assert response.status_code == 200
    model = response.json()
    assert model["variant"] == "v3"
    assert model["states"] == ["initial", "inquiry", "pending-payment"]
    assert model["transitions"][0]["from_states"] == ["initial"]
    assert model["transitions"][0]["entry"] is True


def test_samples(client: TestClient) -> None:
    response = client.get("/api/samples")
    assert response.status_code == 200
    ids = [s["id"] for s in response.json()]
    assert ids == ["booking-v3", "preauth-v2"]

    sample = client.get("/api/samples/booking-v3").json()
    assert sample["format"] == "v3"

    rendered = client.post("/api/visualize", json={"text": sample["text"]})
    assert rendered.status_code == 200


def test_unknown_sample(client: TestClient) -> None:
    response = client.get("/api/samples/nope")
    assert response.status_code == 404


def test_samples_filtered_by_format(client: TestClient) -> None:
    response = client.get("/api/samples", params={"format": "v2"})
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == ["preauth-v2"]

    assert client.get("/api/samples", params={"format": "v9"}).status_code == 422


def test_visualize_overlong_number_is_a_syntax_error(client: TestClient) -> None:
    text = "{:format :v3 :transitions [{:name :a :to :state/b :weight " + "9" * 5000 + "}]}"
    response = client.post("/api/visualize", json={"text": text})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["kind"] == "SyntaxError"
    assert "Invalid number literal" in detail["message"]
