"""
Exception handlers.

Converts domain exceptions and request validation failures into the JSON
error body ``{"error": "..."}`` with the error's own status code.

Dependencies: fastapi
System role: Request-boundary error translation
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.core.exceptions import CorpusChatException, ValidationError
from backend.models.common import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    """Build the JSON error response."""
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request body"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI request validation failures to ValidationError (400)."""
    error = ValidationError(f"Invalid request: {_format_validation_errors(exc)}", field="messages")
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error_msg": error.message},
    )
    return error_response(error.message, error.status_code)


async def domain_exception_handler(request: Request, exc: CorpusChatException) -> JSONResponse:
    """Map domain exceptions to their status code."""
    logger.warning(
        "Request failed",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error_msg": exc.message,
            "status_code": exc.status_code,
        },
    )
    return error_response(exc.message, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort JSON 500 (or the exception's own status_code)."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error_msg": str(exc)},
    )
    return error_response(str(exc), getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(CorpusChatException, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
