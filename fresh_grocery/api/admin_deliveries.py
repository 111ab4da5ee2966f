"""Admin delivery assignment endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.exceptions import ValidationException
from fresh_grocery.models.delivery import DeliveryStatus
from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.delivery_schema import (
    AssignmentCreateSchema,
    AssignRiderSchema,
    DeliveryAssignmentListResponseSchema,
    DeliveryAssignmentResponseSchema,
    DeliveryStatusUpdateSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.delivery_service import DeliveryService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_deliveries_bp = Blueprint("admin_deliveries", __name__, url_prefix="/admin/deliveries")


@admin_deliveries_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DeliveryAssignmentListResponseSchema))
@inject
def list_assignments(
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """List delivery assignments with rider and order, optionally filtered with ?status=."""
    status_arg = request.args.get("status")
    try:
        status = DeliveryStatus(status_arg) if status_arg else None
    except ValueError as e:
        raise ValidationException(f"Unknown delivery status: {status_arg}") from e

    assignments = delivery_service.list_all(status)
    return DeliveryAssignmentListResponseSchema(
        items=[DeliveryAssignmentResponseSchema.model_validate(a) for a in assignments],
        total=len(assignments),
    ).model_dump(mode="json")


@admin_deliveries_bp.route("", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(
    resp=SpectreeResponse(HTTP_201=DeliveryAssignmentResponseSchema),
    json=AssignmentCreateSchema,
)
@inject
def create_assignment(
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """Open an assignment for an order, with or without a rider."""
    data = AssignmentCreateSchema(**request.get_json())
    assignment = delivery_service.create_assignment(
        data.order_id, data.rider_id, start_date=data.start_date, notes=data.notes
    )
    return DeliveryAssignmentResponseSchema.model_validate(assignment).model_dump(mode="json"), 201


@admin_deliveries_bp.route("/assign", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DeliveryAssignmentResponseSchema), json=AssignRiderSchema)
@inject
def assign_rider(
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """Give an order's delivery to a rider, creating or reassigning as needed."""
    data = AssignRiderSchema(**request.get_json())
    assignment = delivery_service.assign_rider(data.order_id, data.rider_id, start_date=data.start_date)
    return DeliveryAssignmentResponseSchema.model_validate(assignment).model_dump(mode="json")


@admin_deliveries_bp.route("/<int:assignment_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DeliveryAssignmentResponseSchema))
@inject
def get_assignment(
    assignment_id: int,
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    assignment = delivery_service.get_assignment(assignment_id)
    return DeliveryAssignmentResponseSchema.model_validate(assignment).model_dump(mode="json")


@admin_deliveries_bp.route("/<int:assignment_id>/status", methods=["PUT"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(
    resp=SpectreeResponse(HTTP_200=DeliveryAssignmentResponseSchema),
    json=DeliveryStatusUpdateSchema,
)
@inject
def update_status(
    assignment_id: int,
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    data = DeliveryStatusUpdateSchema(**request.get_json())
    assignment = delivery_service.get_assignment(assignment_id)
    assignment = delivery_service.update_status(assignment, data.status, data.notes)
    return DeliveryAssignmentResponseSchema.model_validate(assignment).model_dump(mode="json")
