"""Exception handlers that render every failure as ``{"type", "message", ...}``.

Domain exceptions add their machine-readable context (deny reason, current
and target state, missing KYC documents) next to the two fixed keys.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from autosphere.access.exceptions import AuthorizationDenied
from autosphere.core.exceptions import AppException, RateLimitError

logger = logging.getLogger("autosphere.exception")


def _request_extra(request: Request, status_code: int) -> dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
    }


def _error_body(error_type: str, message: str, **context: Any) -> dict[str, Any]:
    return {"type": error_type, "message": message, **context}


def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    extra = _request_extra(request, exc.status_code)
    extra["error_type"] = exc.error_type

    if exc.status_code >= 500:
        level = logging.ERROR
    elif isinstance(exc, AuthorizationDenied):
        # Denials carry their reason into the log line.
        level = logging.WARNING
        extra["reason"] = exc.reason.value
    else:
        level = logging.INFO
    logger.log(level, "%s: %s", exc.error_type, exc.message, extra=extra)

    headers = None
    if isinstance(exc, RateLimitError) and exc.retry_after is not None:
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_type, exc.message, **exc.context),
        headers=headers,
    )


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("http_error", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def _describe(error: dict[str, Any]) -> str:
    field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
    return f"{field}: {error['msg']}" if field else error["msg"]


def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request bodies that fail schema validation. Fields are joined by ``; ``."""
    message = "; ".join(_describe(error) for error in exc.errors())
    return JSONResponse(
        status_code=422, content=_error_body("validation_error", message)
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        extra=_request_extra(request, 500),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("internal_error", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
