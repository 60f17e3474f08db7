"""Custom exception handlers for the FastAPI application.

Converts domain exceptions and request validation errors into JSON responses.
The metadata endpoints speak the `{"error": "..."}` shape their clients expect,
so validation failures there are 400s with that body rather than FastAPI's
default 422 `{"detail": [...]}`.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sonora.domain.exceptions import (
    DomainException,
    ExternalServiceError,
    PermissionDeniedError,
    ValidationException,
)

logger = logging.getLogger(__name__)

METADATA_PATH_PREFIX = "/api/metadata"


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert bytes (raw request bodies) in validation errors to strings."""

    def _sanitize_value(value: Any) -> Any:
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                return value.decode("latin-1")
        elif isinstance(value, dict):
            return {k: _sanitize_value(v) for k, v in value.items()}
        elif isinstance(value, list | tuple):
            return [_sanitize_value(item) for item in value]
        return value

    return [_sanitize_value(error) for error in errors]


# Hey future me, these MUST be registered during app setup (create_app), before any
# request arrives. Without them domain exceptions leak as 500s with stack traces.
def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain and validation exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationException)
    async def validation_exception_handler(
        request: Request, exc: ValidationException
    ) -> JSONResponse:
        """Domain validation failures -> 400 {"error": message}."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message},
        )

    @app.exception_handler(PermissionDeniedError)
    async def permission_denied_handler(
        request: Request, exc: PermissionDeniedError
    ) -> JSONResponse:
        logger.info("Permission denied at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": exc.message},
        )

    @app.exception_handler(ExternalServiceError)
    async def external_service_error_handler(
        request: Request, exc: ExternalServiceError
    ) -> JSONResponse:
        """Upstream failures -> 502 so clients can tell them from our own bugs."""
        logger.warning(
            "External service error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "service": exc.service_name},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": exc.message},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        logger.error("Unhandled domain error at %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Pydantic request validation errors.

        400 {"error": ...} on the metadata routes, FastAPI's usual 422 elsewhere.
        """
        sanitized_errors = _sanitize_validation_errors(list(exc.errors()))
        logger.warning(
            "Request validation error at %s: %s",
            request.url.path,
            sanitized_errors,
            extra={"path": request.url.path, "errors": sanitized_errors},
        )
        if request.url.path.startswith(METADATA_PATH_PREFIX):
            first = sanitized_errors[0] if sanitized_errors else {}
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": str(first.get("msg", "Invalid request"))},
            )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": sanitized_errors},
        )
