# sample/adapters/api/errors.py
"""
Global exception boundary.

The repository layer never recovers from errors; this is the one place
where they become HTTP responses. Every error body has the same shape::

    {"status": "error", "code": 404, "error": "not_found",
     "message": "...", "service": "<APP_NAME>"}
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sample.core.domain.exceptions import (
    ConstraintViolationError,
    DomainError,
    EntityNotFoundError,
    InvalidConfigurationError,
    PersistenceError,
)

logger = structlog.get_logger(__name__)


def error_body(
    code: int,
    error: str,
    message: Any,
    service: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    body = {
        "status": "error",
        "code": code,
        "error": error,
        "message": message,
        "service": service,
    }
    if details is not None:
        body["details"] = details
    return body


def install_exception_handlers(app: FastAPI, app_name: str, debug: bool = False) -> None:
    """Registers the global exception handlers on ``app``."""

    def respond(code: int, error: str, message: Any, details: Optional[Any] = None) -> JSONResponse:
        return JSONResponse(status_code=code, content=error_body(code, error, message, app_name, details))

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return respond(status.HTTP_404_NOT_FOUND, "not_found", exc.message)

    @app.exception_handler(ConstraintViolationError)
    async def conflict_handler(request: Request, exc: ConstraintViolationError):
        logger.warning("constraint_violation", error=exc.message)
        return respond(status.HTTP_409_CONFLICT, "conflict", "The request conflicts with existing data.")

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error("persistence_error", error=exc.message)
        return respond(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "persistence_error",
            exc.message if debug else "The data store is unavailable.",
        )

    @app.exception_handler(InvalidConfigurationError)
    async def configuration_handler(request: Request, exc: InvalidConfigurationError):
        logger.error("invalid_configuration", error=exc.message)
        return respond(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "invalid_configuration",
            exc.message if debug else "Internal Server Error",
        )

    @app.exception_handler(DomainError)
    async def domain_handler(request: Request, exc: DomainError):
        return respond(status.HTTP_400_BAD_REQUEST, "domain_error", exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Standardizes HTTP errors (404 routes, 405 methods, explicit raises).
        """
        response = respond(exc.status_code, "http_error", exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return respond(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "validation_error",
            "Request validation failed.",
            details=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catches unhandled exceptions to avoid leaking stack traces in Prod.
        """
        logger.error("unhandled_exception", error=str(exc), exc_info=exc)
        return respond(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            str(exc) if debug else "Internal Server Error",
        )
