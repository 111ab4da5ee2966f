"""Flask error handlers producing the common JSON error envelope.

Every error body has the shape::

    {"error": str, "details": ..., "code": str | None, "correlationId": str | None}

Handlers flag the request with ``g.needs_rollback`` so the teardown hook
discards the session instead of committing it.
"""

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, g
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from fresh_grocery.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BusinessLogicException,
    DependencyException,
    InvalidOperationException,
    RecordNotFoundException,
    ResourceConflictException,
    ValidationException,
)
from fresh_grocery.utils import get_current_correlation_id

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match decides the status
_BUSINESS_STATUS: list[tuple[type[BusinessLogicException], HTTPStatus]] = [
    (RecordNotFoundException, HTTPStatus.NOT_FOUND),
    (ResourceConflictException, HTTPStatus.CONFLICT),
    (DependencyException, HTTPStatus.CONFLICT),
    (InvalidOperationException, HTTPStatus.CONFLICT),
    (AuthenticationException, HTTPStatus.UNAUTHORIZED),
    (AuthorizationException, HTTPStatus.FORBIDDEN),
    (ValidationException, HTTPStatus.BAD_REQUEST),
]


def error_body(error: str, details: Any = None, code: str | None = None) -> dict[str, Any]:
    return {
        "error": error,
        "details": details,
        "code": code,
        "correlationId": get_current_correlation_id(),
    }


def _mark_rollback() -> None:
    g.needs_rollback = True


def status_for_business_exception(exc: BusinessLogicException) -> HTTPStatus:
    for exc_type, status in _BUSINESS_STATUS:
        if isinstance(exc, exc_type):
            return status
    return HTTPStatus.BAD_REQUEST


def register_core_error_handlers(app: Flask) -> None:
    """HTTP, validation and unexpected errors."""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException) -> tuple[dict[str, Any], int]:
        _mark_rollback()
        status = e.code or HTTPStatus.INTERNAL_SERVER_ERROR
        return error_body(e.name, details=e.description, code=None), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError) -> tuple[dict[str, Any], int]:
        _mark_rollback()
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        return error_body("Validation failed", details=details, code="VALIDATION_FAILED"), HTTPStatus.BAD_REQUEST

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e: IntegrityError) -> tuple[dict[str, Any], int]:
        _mark_rollback()
        logger.warning("Integrity error: %s", e.orig)
        return (
            error_body("The change conflicts with existing data", code="RESOURCE_CONFLICT"),
            HTTPStatus.CONFLICT,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception) -> tuple[dict[str, Any], int]:
        _mark_rollback()
        logger.exception("Unhandled error: %s", e)
        return (
            error_body("Internal server error", code="INTERNAL_ERROR"),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )


def register_business_error_handlers(app: Flask) -> None:
    """Domain exceptions raised by services."""

    @app.errorhandler(BusinessLogicException)
    def handle_business_exception(e: BusinessLogicException) -> tuple[dict[str, Any], int]:
        _mark_rollback()
        status = status_for_business_exception(e)
        if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error("Business error %s: %s", e.error_code, e.message)
        else:
            logger.info("Business error %s: %s", e.error_code, e.message)
        return error_body(e.message, code=e.error_code), status
