"""Tests for health check endpoints."""

import pytest
from fastapi.testclient import TestClient

from statement_interpreter import __version__
from statement_interpreter.main import app


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


class TestHealthEndpoints:

    def test_health_check(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "healthy",
            "service": "statement-interpreter",
            "version": __version__,
        }

    def test_liveness(self, client):
        resp = client.get("/health/live")
        assert resp.status_code == 200
        assert resp.json() == {"alive": True}
