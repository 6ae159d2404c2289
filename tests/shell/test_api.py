"""Integration tests for API endpoints using Starlette TestClient."""

import json
from unittest.mock import MagicMock

import pytest
from starlette.testclient import TestClient

from weightplan.core import state
from weightplan.main import create_app
from weightplan.shell import mcp_server
from weightplan.shell.session import PlanSession
from weightplan.shell.store import SnapshotFirestoreStore


@pytest.fixture
def session(monkeypatch):
    """Session with a mocked store behind the routes."""
    store = MagicMock(spec=SnapshotFirestoreStore)
    store.load.return_value = None
    store.save.return_value = True
    plan_session = PlanSession(store)
    monkeypatch.setattr(mcp_server, "_session", plan_session)
    yield plan_session
    plan_session.close()


@pytest.fixture
def client(session):
    """Create test client with the mocked session."""
    app = create_app()
    return TestClient(app)


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint returns 200 OK."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_json(self, client):
        """Health endpoint returns JSON with status."""
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["service"] == "weightplan"


class TestExportEndpoint:
    """Tests for /export endpoint."""

    def test_export_is_attachment(self, client):
        """The snapshot downloads as a dated JSON file."""
        response = client.get("/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert 'filename="weightplan-' in response.headers["content-disposition"]

    def test_export_contains_logs(self, client, session):
        """Logged entries are part of the export."""
        session.apply(state.add_meal_item, "2025-06-01", "Lunch", "Soup", 120)

        data = client.get("/export").json()
        assert data["dailyLogs"]["2025-06-01"]["meals"]["Lunch"][0]["kcal"] == 120


class TestImportEndpoint:
    """Tests for /import endpoint."""

    def test_import_invalid_document(self, client, session):
        """Invalid documents return 400 and keep the state."""
        before = session.snapshot
        response = client.post("/import", content=b"not json")

        assert response.status_code == 400
        assert response.json() == {"error": "Import failed."}
        assert session.snapshot is before

    def test_import_valid_document(self, client, session):
        """A valid export replaces the state."""
        document = {
            "profile": {"startWeight": 95, "targetWeight": 85},
            "dailyLogs": {"2025-06-01": {"date": "2025-06-01", "weight": 94}},
        }
        response = client.post("/import", content=json.dumps(document))

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert session.snapshot.profile.start_weight == 95
        assert session.snapshot.daily_logs["2025-06-01"].weight == 94


class TestCors:
    """Tests for CORS configuration."""

    def test_preflight_from_allowed_origin(self, client):
        """The default dev origin may call the API."""
        response = client.options(
            "/health",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
