"""Tests for the health check."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from autosphere.db.engine import get_session
from autosphere.main import app


def test_health_ok(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "store": "ok"}


def test_health_reports_unreachable_store(client: TestClient):
    broken = MagicMock(spec=Session)
    broken.exec.side_effect = OperationalError(
        "SELECT 1", {}, Exception("connection refused")
    )
    app.dependency_overrides[get_session] = lambda: broken

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "store": "unavailable"}
