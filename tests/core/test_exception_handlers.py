"""Tests for the unified error response format."""

import logging

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.core.exception_handlers import register_exception_handlers
from autosphere.core.exceptions import (
    InvalidTransitionError,
    RateLimitError,
    StoreUnavailableError,
)


class _Offer(BaseModel):
    amount: float = Field(gt=0)
    note: str


@pytest.fixture(name="app_client")
def app_client_fixture():
    app = FastAPI()
    register_exception_handlers(app)

    @app.post("/transition")
    async def transition():
        raise InvalidTransitionError("listing", "pending", "archived")

    @app.get("/store")
    async def store():
        raise StoreUnavailableError()

    @app.get("/throttled")
    async def throttled():
        raise RateLimitError(retry_after=30)

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    @app.post("/offers")
    async def offers(offer: _Offer):
        return offer

    @app.get("/crash")
    async def crash():
        raise RuntimeError("database on fire")

    return TestClient(app, raise_server_exceptions=False)


def test_app_exception_renders_context(app_client: TestClient):
    response = app_client.post("/transition")

    assert response.status_code == 400
    assert response.json() == {
        "type": "invalid_transition",
        "message": "Cannot move listing from 'pending' to 'archived'",
        "current": "pending",
        "target": "archived",
    }


def test_store_unavailable(app_client: TestClient):
    response = app_client.get("/store")

    assert response.status_code == 503
    assert response.json()["type"] == "store_unavailable"


def test_rate_limit_sets_retry_after(app_client: TestClient):
    response = app_client.get("/throttled")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "30"


def test_http_exception(app_client: TestClient):
    response = app_client.get("/teapot")

    assert response.status_code == 418
    assert response.json() == {"type": "http_error", "message": "short and stout"}


def test_single_validation_error_names_field(app_client: TestClient):
    response = app_client.post("/offers", json={"amount": 0, "note": "x"})

    assert response.status_code == 422
    body = response.json()
    assert body["type"] == "validation_error"
    assert body["message"].startswith("amount: ")
    assert ";" not in body["message"]


def test_multiple_validation_errors_are_joined(app_client: TestClient):
    response = app_client.post("/offers", json={"amount": -5})

    message = response.json()["message"]
    assert "amount: " in message
    assert "note: " in message
    assert "; " in message


def test_unhandled_exception_hides_details(app_client: TestClient):
    response = app_client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {
        "type": "internal_error",
        "message": "An unexpected error occurred",
    }


def test_authorization_denial_is_logged_with_reason(caplog):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/locked")
    async def locked():
        raise AuthorizationDenied(DenyReason.record_locked)

    with caplog.at_level(logging.INFO, logger="autosphere.exception"):
        response = TestClient(app).get("/locked")

    assert response.status_code == 403
    assert response.json()["reason"] == "record_locked"
    (record,) = [r for r in caplog.records if r.name == "autosphere.exception"]
    assert record.levelno == logging.WARNING
    assert record.reason == "record_locked"
