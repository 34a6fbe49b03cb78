"""Tests for the FastAPI service mode."""

from __future__ import annotations

from typing import Any, Dict

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from dtsdoc.orchestrator import Orchestrator
from dtsdoc.service import create_app


class _CountingFactory:
    def __init__(self) -> None:
        self.created: list[Orchestrator] = []

    def __call__(self) -> Orchestrator:
        orchestrator = Orchestrator()
        self.created.append(orchestrator)
        return orchestrator


@pytest.fixture
def factory() -> _CountingFactory:
    return _CountingFactory()


@pytest.fixture
def client(factory: _CountingFactory) -> TestClient:
    return TestClient(create_app(factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_transform_endpoint_returns_pages(
    client: TestClient, factory: _CountingFactory, alarms_json: Dict[str, Any]
) -> None:
    response = client.post("/transform", json=alarms_json)

    assert response.status_code == 200
    data = response.json()
    assert data["issues"] == []
    root = data["pages"]["alarms"]
    assert root["_name"] == "chrome.alarms"
    get = root["_type"]["properties"][1]
    assert get["_method"]["isReturnsAsync"] is True
    assert len(factory.created) == 1


def test_transform_endpoint_accepts_prefix(client: TestClient, alarms_json: Dict[str, Any]) -> None:
    response = client.post("/transform", params={"namespace_prefix": ""}, json=alarms_json)

    assert response.status_code == 200
    assert list(response.json()["pages"]) == ["chrome.alarms"]


def test_malformed_event_is_a_client_error(client: TestClient, alarms_json: Dict[str, Any]) -> None:
    on_alarm = alarms_json["children"][0]["children"][0]["children"][2]
    on_alarm["type"] = {"type": "reference", "name": "events.Event"}

    response = client.post("/transform", json=alarms_json)

    assert response.status_code == 400
    assert "without argument" in response.json()["detail"]


def test_invalid_project_is_a_client_error(client: TestClient) -> None:
    response = client.post("/transform", json={"children": [{"id": 1}]})

    assert response.status_code == 400
    assert "missing id/name/kind" in response.json()["detail"]
