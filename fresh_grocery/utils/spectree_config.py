"""
Spectree configuration with Pydantic v2 compatibility.
"""
import logging
from typing import Any

from flask import Flask, redirect
from spectree import SecurityScheme, SecuritySchemeData, SpecTree
from spectree.models import SecureType

from fresh_grocery.consts import API_DESCRIPTION, API_TITLE

logger = logging.getLogger(__name__)

# Global Spectree instance that can be imported by API modules.
# This will be initialized by configure_spectree() before any imports of the API modules.
api: SpecTree = None  # type: ignore

# Security scheme name used across the OpenAPI spec
BEARER_AUTH_SCHEME_NAME = "BearerAuth"


def configure_spectree(app: Flask) -> SpecTree:
    """
    Configure Spectree with the bearer JWT security scheme and docs routes.

    Returns:
        SpecTree: Configured Spectree instance
    """
    global api

    bearer_scheme = SecurityScheme(
        name=BEARER_AUTH_SCHEME_NAME,
        data=SecuritySchemeData(  # type: ignore[call-arg]
            type=SecureType.HTTP,
            scheme="bearer",
            bearer_format="JWT",
        ),
    )

    # API modules decorate their views with the first instance; later apps
    # (tests build one per test) only need their docs routes registered.
    if api is None:
        api = SpecTree(
            backend_name="flask",
            title=API_TITLE,
            version="1.0.0",
            description=API_DESCRIPTION,
            path="api/docs",  # OpenAPI docs available at /api/docs
            validation_error_status=400,
            security_schemes=[bearer_scheme],
        )

    api.register(app)

    @app.route("/api/docs")
    @app.route("/api/docs/")
    def docs_redirect() -> Any:
        return redirect("/api/docs/swagger/", code=302)

    return api
