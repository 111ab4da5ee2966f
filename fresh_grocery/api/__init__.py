"""API blueprints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, current_app, request

from fresh_grocery.config import Settings
from fresh_grocery.services.auth_service import AuthService
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.profile_service import ProfileService
from fresh_grocery.utils.auth import authenticate_request

# Create main API blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.before_request
@inject
def authenticate(
    auth_service: AuthService = Provide[ServiceContainer.auth_service],
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
    config: Settings = Provide[ServiceContainer.config],
) -> None:
    """Authenticate every /api request unless the endpoint is marked @public."""
    if request.method == "OPTIONS":
        return None

    view_func = current_app.view_functions.get(request.endpoint) if request.endpoint else None
    if view_func is None or getattr(view_func, "is_public", False):
        return None

    authenticate_request(auth_service, profile_service, config, view_func)
    return None


# App-specific blueprints are registered in fresh_grocery/startup.py:register_blueprints()
