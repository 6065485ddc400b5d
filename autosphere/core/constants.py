"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and common response definitions for API routes.
"""

from dataclasses import dataclass
from typing import Any

from autosphere.models.error import ErrorResponse


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    USER = RouteConfig(prefix="/users", tag="users")
    HEALTH = RouteConfig(prefix="/health", tag="health")
    LISTING = RouteConfig(prefix="/listings", tag="listings")
    BOOKING = RouteConfig(prefix="/bookings", tag="bookings")
    RENTAL = RouteConfig(prefix="/rentals", tag="rentals")
    PAYMENT = RouteConfig(prefix="/payments", tag="payments")
    KYC = RouteConfig(prefix="/kyc", tag="kyc")
    NOTIFICATION = RouteConfig(prefix="/notifications", tag="notifications")
    BROADCAST = RouteConfig(prefix="/broadcasts", tag="broadcasts")
    INQUIRY = RouteConfig(prefix="/inquiries", tag="inquiries")
    UPLOAD = RouteConfig(prefix="/uploads", tag="uploads")


# Common response definitions for reuse across routers
# Use these when configuring APIRouter or individual endpoints
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int, dict[str, Any]] = {
        401: {
            "model": ErrorResponse,
            "description": "Not authenticated or invalid credentials",
        }
    }
    FORBIDDEN: dict[int, dict[str, Any]] = {
        403: {
            "model": ErrorResponse,
            "description": "Role, ownership or lock check denied the action",
        }
    }
    NOT_FOUND: dict[int, dict[str, Any]] = {
        404: {"model": ErrorResponse, "description": "Resource not found"}
    }
    CONFLICT: dict[int, dict[str, Any]] = {
        409: {"model": ErrorResponse, "description": "Resource already exists"}
    }
    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {
            "model": ErrorResponse,
            "description": "Missing field or transition not allowed from current state",
        }
    }
    UNAVAILABLE: dict[int, dict[str, Any]] = {
        503: {"model": ErrorResponse, "description": "Storage unavailable, retry"}
    }
