"""Utility functions and helpers."""

import uuid
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from flask import Flask, g, has_request_context, request


def get_current_correlation_id() -> str | None:
    """Get the current request's correlation ID."""
    if not has_request_context():
        return None
    return getattr(g, "correlation_id", None)


def _init_request_id(app: Flask) -> None:
    """Register before_request handler to set correlation ID from X-Request-ID header."""

    @app.before_request
    def set_request_id() -> None:
        g.correlation_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def echo_request_id(response):  # type: ignore[no-untyped-def]
        correlation_id = get_current_correlation_id()
        if correlation_id:
            response.headers["X-Request-ID"] = correlation_id
        return response


def utcnow() -> datetime:
    return datetime.now(UTC)


def local_today(timezone: str) -> date:
    """Today's date in the storefront's delivery timezone."""
    return datetime.now(ZoneInfo(timezone)).date()
