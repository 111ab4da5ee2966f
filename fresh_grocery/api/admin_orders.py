"""Admin order and payment endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.exceptions import ValidationException
from fresh_grocery.models.order import PaymentStatus
from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.order_schema import (
    AdminOrderListResponseSchema,
    AdminOrderResponseSchema,
    OrderStatusUpdateSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.order_service import OrderService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_orders_bp = Blueprint("admin_orders", __name__, url_prefix="/admin/orders")


@admin_orders_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=AdminOrderListResponseSchema))
@inject
def list_orders(
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    """List all orders with customer profiles, optionally filtered with ?payment_status=."""
    status_arg = request.args.get("payment_status")
    try:
        payment_status = PaymentStatus(status_arg) if status_arg else None
    except ValueError as e:
        raise ValidationException(f"Unknown payment status: {status_arg}") from e

    orders = order_service.list_all(payment_status)
    return AdminOrderListResponseSchema(
        items=[AdminOrderResponseSchema.model_validate(order) for order in orders],
        total=len(orders),
    ).model_dump(mode="json")


@admin_orders_bp.route("/<int:order_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=AdminOrderResponseSchema))
@inject
def get_order(
    order_id: int,
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    order = order_service.get_order(order_id)
    return AdminOrderResponseSchema.model_validate(order).model_dump(mode="json")


@admin_orders_bp.route("/<int:order_id>/status", methods=["PUT"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=AdminOrderResponseSchema), json=OrderStatusUpdateSchema)
@inject
def update_payment_status(
    order_id: int,
    order_service: OrderService = Provide[ServiceContainer.order_service],
):
    """Move an order's payment status. Cancelling also cancels its delivery."""
    data = OrderStatusUpdateSchema(**request.get_json())
    order = order_service.update_payment_status(order_id, data.payment_status, data.transaction_id)
    return AdminOrderResponseSchema.model_validate(order).model_dump(mode="json")
