"""Admin dashboard endpoint."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint
from spectree import Response as SpectreeResponse

from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.dashboard_schema import DashboardResponseSchema
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.dashboard_service import DashboardService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_dashboard_bp = Blueprint("admin_dashboard", __name__, url_prefix="/admin/dashboard")


@admin_dashboard_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DashboardResponseSchema))
@inject
def get_dashboard(
    dashboard_service: DashboardService = Provide[ServiceContainer.dashboard_service],
):
    """Catalog, subscription and revenue totals plus the five latest orders."""
    return DashboardResponseSchema.model_validate(dashboard_service.get_summary()).model_dump(mode="json")
