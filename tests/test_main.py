"""Tests for application startup and shutdown."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from autosphere.main import app, lifespan


@pytest.mark.asyncio
async def test_lifespan_initializes_firebase_and_closes_clients():
    with (
        patch("autosphere.main.init_firebase") as init_firebase,
        patch("autosphere.main.close_http_clients", new=AsyncMock()) as close_clients,
    ):
        async with lifespan(FastAPI()):
            init_firebase.assert_called_once_with()
            close_clients.assert_not_awaited()

        close_clients.assert_awaited_once_with()


def test_routes_are_mounted():
    paths = {route.path for route in app.routes}

    for path in (
        "/health",
        "/auth/login",
        "/listings",
        "/bookings",
        "/rentals",
        "/payments",
        "/kyc/me",
        "/notifications",
        "/admin",
    ):
        assert any(p == path or p.startswith(path + "/") for p in paths), path
