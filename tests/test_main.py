"""Smoke tests for the assembled application."""

from fastapi.testclient import TestClient

from chronicles.main import app, build_granian_kwargs
from chronicles.shared.api.utils import get_all_routes_info


def test_routes_are_mounted_under_api_prefix():
    with TestClient(app) as client:
        response = client.get("/api/v1/health")
        paths = {route["path"] for route in get_all_routes_info(app)}

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert {
        "/api/v1/basketball/games/live",
        "/api/v1/basketball/games/stream",
        "/api/v1/basketball/stream/{game_id}/token",
        "/api/v1/basketball/stream/webhook",
        "/api/v1/valentines/login",
    } <= paths


def test_request_validation_uses_failure_envelope():
    with TestClient(app) as client:
        response = client.get("/api/v1/basketball/games/stream", params={"limit": "x"})

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["errcode"] == "E_INVALID_PARAMS"
    assert data["details"]["errors"]


def test_granian_kwargs():
    kwargs = build_granian_kwargs()

    assert kwargs["interface"] == "asgi"
    assert isinstance(kwargs["port"], int)
