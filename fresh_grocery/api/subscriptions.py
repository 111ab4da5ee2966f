"""Customer subscription and basket endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.schemas.subscription_schema import (
    PriceQuoteResponseSchema,
    SubscriptionCreateSchema,
    SubscriptionItemCreateSchema,
    SubscriptionItemListResponseSchema,
    SubscriptionItemResponseSchema,
    SubscriptionItemUpdateSchema,
    SubscriptionListResponseSchema,
    SubscriptionResponseSchema,
    SubscriptionUpdateSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.subscription_service import SubscriptionService
from fresh_grocery.utils.auth import current_user_id, current_user_is_admin
from fresh_grocery.utils.spectree_config import api

subscriptions_bp = Blueprint("subscriptions", __name__, url_prefix="/subscriptions")


@subscriptions_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=SubscriptionListResponseSchema))
@inject
def list_subscriptions(
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """List the caller's active and paused subscriptions, newest first."""
    subscriptions = subscription_service.list_user_subscriptions(current_user_id())
    current = subscription_service.get_current_subscription(current_user_id())
    return SubscriptionListResponseSchema(
        items=[SubscriptionResponseSchema.model_validate(s) for s in subscriptions],
        total=len(subscriptions),
        current_id=current.id if current else None,
    ).model_dump(mode="json")


@subscriptions_bp.route("", methods=["POST"])
@api.validate(resp=SpectreeResponse(HTTP_201=SubscriptionResponseSchema), json=SubscriptionCreateSchema)
@inject
def create_subscription(
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    data = SubscriptionCreateSchema(**(request.get_json(silent=True) or {}))
    subscription = subscription_service.create_subscription(current_user_id(), data.type)
    return SubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json"), 201


@subscriptions_bp.route("/<int:subscription_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=SubscriptionResponseSchema))
@inject
def get_subscription(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    return SubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json")


@subscriptions_bp.route("/<int:subscription_id>", methods=["PUT"])
@api.validate(resp=SpectreeResponse(HTTP_200=SubscriptionResponseSchema), json=SubscriptionUpdateSchema)
@inject
def update_subscription(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """Change the subscription type and/or status."""
    data = SubscriptionUpdateSchema(**request.get_json())
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    subscription = subscription_service.update_subscription(
        subscription, subscription_type=data.type, status=data.status
    )
    return SubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json")


@subscriptions_bp.route("/<int:subscription_id>", methods=["DELETE"])
@inject
def delete_subscription(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    subscription_service.delete_subscription(subscription)
    return "", 204


@subscriptions_bp.route("/<int:subscription_id>/pause", methods=["POST"])
@api.validate(resp=SpectreeResponse(HTTP_200=SubscriptionResponseSchema))
@inject
def toggle_pause(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """Pause an active subscription or resume a paused one."""
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    subscription = subscription_service.toggle_pause(subscription)
    return SubscriptionResponseSchema.model_validate(subscription).model_dump(mode="json")


@subscriptions_bp.route("/<int:subscription_id>/quote", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=PriceQuoteResponseSchema))
@inject
def get_quote(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """Pricing breakdown of the basket for the subscription's period."""
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    return PriceQuoteResponseSchema.model_validate(
        subscription_service.quote(subscription)
    ).model_dump()


# ── Items ─────────────────────────────────────────────────────────────


@subscriptions_bp.route("/<int:subscription_id>/items", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=SubscriptionItemListResponseSchema))
@inject
def list_items(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    items = subscription_service.list_items(subscription)
    return SubscriptionItemListResponseSchema(
        items=[SubscriptionItemResponseSchema.model_validate(item) for item in items],
        total=len(items),
    ).model_dump(mode="json")


@subscriptions_bp.route("/<int:subscription_id>/items", methods=["POST"])
@api.validate(
    resp=SpectreeResponse(HTTP_201=SubscriptionItemResponseSchema),
    json=SubscriptionItemCreateSchema,
)
@inject
def add_item(
    subscription_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """Add a product to the basket. Adding a product twice adds to its quantity."""
    data = SubscriptionItemCreateSchema(**request.get_json())
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    item = subscription_service.add_item(subscription, data.product_id, data.quantity)
    return SubscriptionItemResponseSchema.model_validate(item).model_dump(mode="json"), 201


@subscriptions_bp.route("/<int:subscription_id>/items/<int:item_id>", methods=["PUT"])
@api.validate(
    resp=SpectreeResponse("HTTP_204", HTTP_200=SubscriptionItemResponseSchema),
    json=SubscriptionItemUpdateSchema,
)
@inject
def update_item(
    subscription_id: int,
    item_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    """Set an item's quantity. A quantity below 1 removes the item (204)."""
    data = SubscriptionItemUpdateSchema(**request.get_json())
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    item = subscription_service.update_item_quantity(subscription, item_id, data.quantity)
    if item is None:
        return "", 204
    return SubscriptionItemResponseSchema.model_validate(item).model_dump(mode="json")


@subscriptions_bp.route("/<int:subscription_id>/items/<int:item_id>", methods=["DELETE"])
@inject
def remove_item(
    subscription_id: int,
    item_id: int,
    subscription_service: SubscriptionService = Provide[ServiceContainer.subscription_service],
):
    subscription = subscription_service.get_for_user(
        subscription_id, current_user_id(), current_user_is_admin()
    )
    subscription_service.remove_item(subscription, item_id)
    return "", 204
