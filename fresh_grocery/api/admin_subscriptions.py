"""Admin subscription endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.exceptions import ValidationException
from fresh_grocery.models.profile import AppRole
from fresh_grocery.models.subscription import SubscriptionStatus
from fresh_grocery.schemas.subscription_schema import (
    AdminSubscriptionListResponseSchema,
    AdminSubscriptionResponseSchema,
    SubscriptionStatusSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.subscription_service import SubscriptionService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_subscriptions_bp = Blueprint(
    "admin_subscriptions", __name__, url_prefix="/admin/subscriptions"
)


@admin_subscriptions_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=AdminSubscriptionListResponseSchema))
@inject
def list_subscriptions(
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """List all subscriptions with their owners, optionally filtered with ?status=."""
    status_arg = request.args.get("status")
    try:
        status = SubscriptionStatus(status_arg) if status_arg else None
    except ValueError as e:
        raise ValidationException(f"Unknown subscription status: {status_arg}") from e

    subscriptions = subscription_service.list_all(status)
    return AdminSubscriptionListResponseSchema(
        items=[AdminSubscriptionResponseSchema.model_validate(s) for s in subscriptions],
        total=len(subscriptions),
    ).model_dump(mode="json")


@admin_subscriptions_bp.route("/<int:subscription_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=AdminSubscriptionResponseSchema))
@inject
def get_subscription(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    subscription = subscription_service.get_subscription(subscription_id)
    return AdminSubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json")


@admin_subscriptions_bp.route("/<int:subscription_id>/status", methods=["PUT"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(
    resp=SpectreeResponse(HTTP_200=AdminSubscriptionResponseSchema),
    json=SubscriptionStatusSchema,
)
@inject
def set_status(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    data = SubscriptionStatusSchema(**request.get_json())
    subscription = subscription_service.get_subscription(subscription_id)
    subscription = subscription_service.set_status(subscription, data.status)
    return AdminSubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json")
