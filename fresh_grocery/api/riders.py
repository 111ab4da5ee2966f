"""Rider self-service endpoints: signup, availability and daily deliveries."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.delivery_schema import (
    DailyDeliveryMarkSchema,
    DailyDeliveryResponseSchema,
    DeliveryAssignmentListResponseSchema,
    DeliveryAssignmentResponseSchema,
    DeliveryStatusUpdateSchema,
    TodayDeliveryListResponseSchema,
    TodayDeliveryResponseSchema,
)
from fresh_grocery.schemas.rider_schema import (
    RiderAvailabilitySchema,
    RiderResponseSchema,
    RiderSignupSchema,
    RiderStatsResponseSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.delivery_service import DeliveryService
from fresh_grocery.services.rider_service import RiderService
from fresh_grocery.utils.auth import allow_roles, current_user_id
from fresh_grocery.utils.spectree_config import api

riders_bp = Blueprint("riders", __name__, url_prefix="/riders")


@riders_bp.route("/signup", methods=["POST"])
@api.validate(resp=SpectreeResponse(HTTP_201=RiderResponseSchema), json=RiderSignupSchema)
@inject
def signup(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """Register the caller as a rider. New riders wait for admin approval."""
    data = RiderSignupSchema(**request.get_json())
    rider = rider_service.signup(current_user_id(), data.phone, data.vehicle_type)
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json"), 201


@riders_bp.route("/me", methods=["GET"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderResponseSchema))
@inject
def get_me(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    """The caller's rider record, whatever its approval status."""
    rider = rider_service.get_by_user(current_user_id())
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json")


@riders_bp.route("/me/availability", methods=["PUT"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderResponseSchema), json=RiderAvailabilitySchema)
@inject
def set_availability(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
):
    data = RiderAvailabilitySchema(**request.get_json())
    rider = rider_service.set_availability(current_user_id(), data.is_available)
    return RiderResponseSchema.model_validate(rider).model_dump(mode="json")


@riders_bp.route("/assignments", methods=["GET"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DeliveryAssignmentListResponseSchema))
@inject
def list_assignments(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """The caller's delivery assignments, newest first."""
    rider = rider_service.get_approved_by_user(current_user_id())
    assignments = delivery_service.list_rider_assignments(rider)
    return DeliveryAssignmentListResponseSchema(
        items=[DeliveryAssignmentResponseSchema.model_validate(a) for a in assignments],
        total=len(assignments),
    ).model_dump(mode="json")


@riders_bp.route("/assignments/<int:assignment_id>/status", methods=["PUT"])
@allow_roles(AppRole.RIDER.value)
@api.validate(
    resp=SpectreeResponse(HTTP_200=DeliveryAssignmentResponseSchema),
    json=DeliveryStatusUpdateSchema,
)
@inject
def update_assignment_status(
    assignment_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """Move one of the caller's assignments along, e.g. to picked_up."""
    data = DeliveryStatusUpdateSchema(**request.get_json())
    rider = rider_service.get_approved_by_user(current_user_id())
    assignment = delivery_service.update_status_as_rider(
        assignment_id, rider, data.status, data.notes
    )
    return DeliveryAssignmentResponseSchema.model_validate(assignment).model_dump(mode="json")


@riders_bp.route("/deliveries/today", methods=["GET"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=TodayDeliveryListResponseSchema))
@inject
def list_todays_deliveries(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """Deliveries still pending today on the caller's open assignments."""
    rider = rider_service.get_approved_by_user(current_user_id())
    deliveries = delivery_service.todays_deliveries(rider)
    return TodayDeliveryListResponseSchema(
        items=[TodayDeliveryResponseSchema.model_validate(d) for d in deliveries],
        total=len(deliveries),
    ).model_dump(mode="json")


@riders_bp.route("/stats", methods=["GET"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=RiderStatsResponseSchema))
@inject
def get_stats(
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    rider = rider_service.get_approved_by_user(current_user_id())
    return RiderStatsResponseSchema.model_validate(delivery_service.rider_stats(rider)).model_dump()


@riders_bp.route("/deliveries/<int:daily_id>/deliver", methods=["POST"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DailyDeliveryResponseSchema))
@inject
def mark_delivered(
    daily_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    data = DailyDeliveryMarkSchema(**(request.get_json(silent=True) or {}))
    rider = rider_service.get_approved_by_user(current_user_id())
    daily = delivery_service.mark_daily_delivered(daily_id, rider, data.notes)
    return DailyDeliveryResponseSchema.model_validate(daily).model_dump(mode="json")


@riders_bp.route("/deliveries/<int:daily_id>/miss", methods=["POST"])
@allow_roles(AppRole.RIDER.value)
@api.validate(resp=SpectreeResponse(HTTP_200=DailyDeliveryResponseSchema))
@inject
def mark_missed(
    daily_id: int,
    rider_service: RiderService = Provide[ServiceContainer.rider_service],
    delivery_service: DeliveryService = Provide[ServiceContainer.delivery_service],
):
    """Mark a day as missed, with an optional reason in ``notes``."""
    data = DailyDeliveryMarkSchema(**(request.get_json(silent=True) or {}))
    rider = rider_service.get_approved_by_user(current_user_id())
    daily = delivery_service.mark_daily_missed(daily_id, rider, data.notes)
    return DailyDeliveryResponseSchema.model_validate(daily).model_dump(mode="json")
