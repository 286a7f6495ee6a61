"""
Response Envelope

Every endpoint answers with ``{success, data?, error?, message?}``.
Routers build responses through these helpers; the exception handlers
registered in ``main.py`` render framework-level failures (request
validation, auth dependencies, rate limiting) into the same shape.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolbase.modules.shared.errors import ServiceError

logger = logging.getLogger(__name__)


def success_response(
    data: Any = None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Build a ``success: true`` envelope."""
    content: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(
    error: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    message: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a ``success: false`` envelope."""
    content: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def service_error_response(e: ServiceError) -> JSONResponse:
    """Convert a service error into its envelope."""
    return error_response(e.error, e.status_code, e.message)


def internal_error_response(error: str, e: Exception) -> JSONResponse:
    """500 envelope; the raw exception text only appears in ``message``."""
    return error_response(error, status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "An unexpected error occurred")


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # Drop the leading "body"/"query" segment
        loc = [str(p) for p in err.get("loc", ())[1:]]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return ", ".join(parts)


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response("Validation failed", status.HTTP_400_BAD_REQUEST, _format_validation_errors(exc))


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        error = str(detail.get("error", "Error"))
        message = detail.get("message")
    else:
        error = str(detail)
        message = None
    return error_response(error, exc.status_code, message, headers=getattr(exc, "headers", None))


async def service_exception_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    # Raised from dependencies (auth gateway); route bodies handle their own
    return service_error_response(exc)


async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error: {exc}")
    return internal_error_response("Internal server error", exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope renderers to ``app``."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
