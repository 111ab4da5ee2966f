"""Admin dashboard schema."""

from pydantic import BaseModel

from fresh_grocery.schemas.order_schema import AdminOrderResponseSchema


class DashboardResponseSchema(BaseModel):
    total_products: int
    active_subscriptions: int
    completed_orders: int
    pending_orders: int
    total_revenue: float
    recent_orders: list[AdminOrderResponseSchema]

    model_config = {"from_attributes": True}
