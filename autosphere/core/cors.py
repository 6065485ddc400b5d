"""CORS configuration for the storefront and back-office frontends."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from autosphere.core.request_logging import REQUEST_ID_HEADER
from autosphere.core.settings import get_settings

ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def add_cors_middleware(app: FastAPI) -> None:
    origins = get_settings().cors_origins_list

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Session cookies only travel to explicitly listed origins.
        allow_credentials="*" not in origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
