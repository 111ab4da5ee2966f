"""Admin rider management endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.rider_schema import (
    RiderCreateSchema,
    RiderListResponseSchema,
    RiderResponseSchema,
    RiderReviewSchema,
    RiderUpdateSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.rider_service import RiderService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_riders_bp = Blueprint("admin_riders", __name__, url_prefix="/admin/riders")


def _rider_list(riders) -> dict:  # type: ignore[no-untyped-def]
    return RiderListResponseSchema(
        items=[RiderResponseSchema.model_validate(rider) for rider in riders],
        total=len(riders),
    ).model_dump(mode="json")


@admin_riders_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderListResponseSchema))
@inject
def list_riders(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """List all riders, newest first."""
    return _rider_list(rider_service.list_all())


@admin_riders_bp.route("/available", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderListResponseSchema))
@inject
def list_available_riders(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """Approved riders currently accepting assignments."""
    return _rider_list(rider_service.list_available())


@admin_riders_bp.route("/pending", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderListResponseSchema))
@inject
def list_pending_riders(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    return _rider_list(rider_service.list_pending())


@admin_riders_bp.route("", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_201=RiderResponseSchema), json=RiderCreateSchema)
@inject
def create_rider(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """Onboard an existing user as an approved, available rider."""
    data = RiderCreateSchema(**request.get_json())
    rider = rider_service.create_rider(data.user_id, data.phone, data.vehicle_type)
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json"), 201


@admin_riders_bp.route("/<int:rider_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderResponseSchema))
@inject
def get_rider(
    rider_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    rider = rider_service.get_by_id(rider_id)
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json")


@admin_riders_bp.route("/<int:rider_id>", methods=["PUT"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderResponseSchema), json=RiderUpdateSchema)
@inject
def update_rider(
    rider_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    data = RiderUpdateSchema(**request.get_json())
    rider = rider_service.update_rider(rider_id, **data.model_dump(exclude_unset=True))
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json")


@admin_riders_bp.route("/<int:rider_id>/review", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderResponseSchema), json=RiderReviewSchema)
@inject
def review_rider(
    rider_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """Approve or reject a rider signup."""
    data = RiderReviewSchema(**request.get_json())
    rider = rider_service.review_rider(rider_id, data.approved)
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json")


@admin_riders_bp.route("/<int:rider_id>", methods=["DELETE"])
@allow_roles(AppRole.ADMIN.value)
@inject
def delete_rider(
    rider_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """Delete a rider. Refused while the rider has open assignments."""
    rider_service.delete_rider(rider_id)
    return "", 204
