"""API tests for the analysis endpoints.

The facade dependency is overridden with a sequential, container-backed
instance so requests never touch process-wide state.
"""

import pytest
from fastapi.testclient import TestClient

from statement_interpreter.config import Settings
from statement_interpreter.dependencies import get_facade
from statement_interpreter.errors import AnalysisTimeoutError
from statement_interpreter.facade import InterpreterFacade
from statement_interpreter.main import app


@pytest.fixture()
def client():
    facade = InterpreterFacade(settings=Settings(parallel_analyzers=False))
    app.dependency_overrides[get_facade] = lambda: facade
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAnalyzeEndpoint:

    def test_full_report(self, client, acme_payload):
        resp = client.post("/api/v1/analysis", json=acme_payload)
        assert resp.status_code == 200
        body = resp.json()
        assert body["symbol"] == "ACME"
        assert body["companyName"] == "Acme Industrial Corp."
        assert body["healthScore"]["grade"]
        assert body["dataQuality"]["historicalDepth"] == {"annual": 3, "quarterly": 4}
        assert "beginnerSummary" in body
        assert "topThreeConcerns" in body["beginnerSummary"]

    def test_query_options(self, client, acme_payload):
        resp = client.post(
            "/api/v1/analysis",
            params={"include_industry_context": "false", "synthesize_ttm": "true"},
            json=acme_payload,
        )
        assert resp.status_code == 200
        ratios = resp.json()["ratios"]
        assert all(r["interpretation"]["industryContext"] is None for r in ratios)
        assert "inventory_turnover" not in {r["id"] for r in ratios}

    def test_insufficient_history(self, client, acme_payload):
        acme_payload["incomeStatements"]["annual"] = acme_payload["incomeStatements"]["annual"][:1]
        resp = client.post("/api/v1/analysis", json=acme_payload)
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "insufficient_data"
        assert "Insufficient historical data" in body["message"]
        assert body["missing"] == []

    def test_missing_statements(self, client):
        resp = client.post("/api/v1/analysis", json={"symbol": "EMPTY"})
        assert resp.status_code == 422
        assert resp.json()["missing"] == [
            "incomeStatements", "balanceSheets", "cashFlowStatements",
        ]

    def test_malformed_body(self, client):
        """Schema violations are FastAPI's own 422."""
        resp = client.post("/api/v1/analysis", json={"incomeStatements": {}})
        assert resp.status_code == 422
        assert "detail" in resp.json()

    def test_timeout_maps_to_504(self, acme_payload):
        class _TimingOutFacade:
            def analyze_to_dict(self, statements, options):
                raise AnalysisTimeoutError("Analysis of ACME exceeded 0.01s")

        app.dependency_overrides[get_facade] = _TimingOutFacade
        try:
            resp = TestClient(app).post("/api/v1/analysis", json=acme_payload)
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 504
        assert resp.json()["error"] == "analysis_timeout"


class TestQuickEndpoint:

    def test_quick(self, client, acme_payload):
        resp = client.post("/api/v1/analysis/quick", json=acme_payload)
        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {"symbol", "overall", "healthGrade", "topConcern", "topStrength"}
        assert body["symbol"] == "ACME"

    def test_quick_insufficient(self, client):
        resp = client.post("/api/v1/analysis/quick", json={"symbol": "EMPTY"})
        assert resp.status_code == 422
        assert resp.json()["error"] == "insufficient_data"


class TestRoot:

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["service"] == "Statement Interpreter API"
        assert body["endpoints"]["quick"] == "/api/v1/analysis/quick"
