"""Tests for health and config endpoints."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from nursery.api.config import router


def _client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def test_health():
    resp = _client().get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_config_exposes_analysis_settings():
    data = _client().get("/api/config").json()
    assert data["analysis_window_days"] == 14
    assert data["minimum_sample_size"] == 5
    assert "tz" in data
