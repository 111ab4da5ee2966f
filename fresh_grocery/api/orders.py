"""Checkout and customer order endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.schemas.order_schema import (
    OrderCreateSchema,
    OrderListResponseSchema,
    OrderResponseSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.order_service import OrderService, PaymentDetails
from fresh_grocery.utils.auth import current_user_id, current_user_is_admin
from fresh_grocery.utils.spectree_config import api

orders_bp = Blueprint("orders", __name__, url_prefix="/orders")


@orders_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=OrderListResponseSchema))
@inject
def list_orders(
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    """List the caller's orders, newest first, with delivery progress."""
    orders = order_service.list_user_orders(current_user_id())
    return OrderListResponseSchema(
        items=[OrderResponseSchema.model_validate(order) for order in orders],
        total=len(orders),
    ).model_dump(mode="json")


@orders_bp.route("", methods=["POST"])
@api.validate(resp=SpectreeResponse(HTTP_201=OrderResponseSchema), json=OrderCreateSchema)
@inject
def create_order(
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    """Check out a subscription. The amount charged is the server-side quote."""
    data = OrderCreateSchema(**request.get_json())
    order = order_service.create_order(
        current_user_id(),
        data.subscription_id,
        data.payment_method,
        PaymentDetails(**data.payment_details.model_dump()),
    )
    return OrderResponseSchema.model_validate(order).model_dump(mode="json"), 201


@orders_bp.route("/<int:order_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=OrderResponseSchema))
@inject
def get_order(
    order_id: int,
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    order = order_service.get_for_user(order_id, current_user_id(), current_user_is_admin())
    return OrderResponseSchema.model_validate(order).model_dump(mode="json")
