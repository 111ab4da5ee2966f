"""Authentication and authorization helpers for the /api request hook."""

import logging
from collections.abc import Callable
from typing import Any

from flask import g, request

from fresh_grocery.config import Settings
from fresh_grocery.exceptions import AuthenticationException, AuthorizationException
from fresh_grocery.models.profile import AppRole
from fresh_grocery.services.auth_service import AuthContext, AuthService
from fresh_grocery.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def public(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to mark an endpoint as publicly accessible (no authentication required).

    Usage:
        @products_bp.route("")
        @public
        def list_products():
            ...
    """
    func.is_public = True  # type: ignore[attr-defined]
    return func


def allow_roles(*roles: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to restrict endpoint access to specific roles.

    The user must have at least one of the listed roles. Endpoints without
    this decorator are open to any authenticated user. Role names are
    validated at startup against AuthService.configured_roles.

    Usage:
        @admin_products_bp.route("", methods=["POST"])
        @allow_roles("admin")
        def create_product():
            ...
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        func.allowed_roles = set(roles)  # type: ignore[attr-defined]
        return func
    return decorator


def get_auth_context() -> AuthContext | None:
    """Get the current authentication context from flask.g.

    Returns:
        AuthContext if user is authenticated, None otherwise
    """
    return getattr(g, "auth_context", None)


def require_auth_context() -> AuthContext:
    auth_context = get_auth_context()
    if auth_context is None:
        raise AuthenticationException("Authentication required")
    return auth_context


def current_user_id() -> str:
    return require_auth_context().subject


def current_user_is_admin() -> bool:
    auth_context = get_auth_context()
    return auth_context is not None and AppRole.ADMIN.value in auth_context.roles


def extract_token_from_request(config: Settings) -> str | None:
    """Extract JWT token from request cookie or Authorization header.

    Checks cookie first, then Authorization header with Bearer prefix.
    """
    token = request.cookies.get(config.auth_cookie_name)
    if token:
        logger.debug("Token extracted from cookie")
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header:
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            logger.debug("Token extracted from Authorization header")
            return parts[1]

    return None


def check_authorization(
    auth_context: AuthContext,
    view_func: Callable[..., Any] | None = None,
) -> None:
    """Check the caller holds one of the roles the endpoint allows.

    Raises:
        AuthorizationException: If user lacks required permissions
    """
    required_roles: set[str] = getattr(view_func, "allowed_roles", set()) if view_func else set()
    if not required_roles:
        return

    if auth_context.roles & required_roles:
        logger.debug(
            "User authorized: has %s, requires one of %s",
            auth_context.roles & required_roles,
            required_roles,
        )
        return

    raise AuthorizationException(
        f"Insufficient permissions - requires one of: {', '.join(sorted(required_roles))}"
    )


def authenticate_request(
    auth_service: AuthService,
    profile_service: ProfileService,
    config: Settings,
    view_func: Callable[..., Any] | None = None,
) -> AuthContext:
    """Authenticate the current request and store auth context in flask.g.

    The caller's profile is created on first sight and its stored roles are
    attached to the context before authorization is checked.

    Raises:
        AuthenticationException: If token is missing, invalid, or expired
        AuthorizationException: If user lacks required permissions
    """
    token = extract_token_from_request(config)
    if not token:
        raise AuthenticationException("No valid token provided")

    auth_context = auth_service.validate_token(token)
    profile = profile_service.ensure_profile(auth_context)
    auth_context.roles = set(profile.role_names)
    g.auth_context = auth_context

    check_authorization(auth_context, view_func)

    logger.debug(
        "Request authenticated: subject=%s email=%s roles=%s",
        auth_context.subject,
        auth_context.email,
        sorted(auth_context.roles),
    )
    return auth_context


def validate_allow_roles_at_startup(app: Any, auth_service: AuthService) -> None:
    """Validate that all @allow_roles decorators reference configured roles.

    Raises:
        ValueError: If any endpoint uses an unrecognized role name
    """
    configured = auth_service.configured_roles
    for endpoint_name, view_func in app.view_functions.items():
        allowed: set[str] = getattr(view_func, "allowed_roles", set())
        unknown = allowed - configured
        if unknown:
            raise ValueError(
                f"Endpoint '{endpoint_name}' uses @allow_roles with "
                f"unrecognized roles: {sorted(unknown)}. "
                f"Configured roles are: {sorted(configured)}"
            )
