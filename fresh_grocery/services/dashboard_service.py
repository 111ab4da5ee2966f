"""Admin dashboard aggregates."""

from dataclasses import dataclass
from decimal import Decimal

from fresh_grocery.models.order import Order, PaymentStatus
from fresh_grocery.models.subscription import SubscriptionStatus
from fresh_grocery.services.order_service import OrderService
from fresh_grocery.services.product_service import ProductService
from fresh_grocery.services.subscription_service import SubscriptionService

RECENT_ORDER_LIMIT = 5


@dataclass
class DashboardSummary:
    total_products: int
    active_subscriptions: int
    completed_orders: int
    pending_orders: int
    total_revenue: Decimal
    recent_orders: list[Order]


class DashboardService:
    def __init__(
        self,
        product_service: ProductService,
        subscription_service: SubscriptionService,
        order_service: OrderService,
    ):
        self.product_service = product_service
        self.subscription_service = subscription_service
        self.order_service = order_service

    def get_summary(self) -> DashboardSummary:
        return DashboardSummary(
            total_products=self.product_service.count(),
            active_subscriptions=self.subscription_service.count_by_status(SubscriptionStatus.ACTIVE),
            completed_orders=self.order_service.count_by_status(PaymentStatus.COMPLETED),
            pending_orders=self.order_service.count_by_status(PaymentStatus.PENDING),
            total_revenue=self.order_service.completed_revenue(),
            recent_orders=self.order_service.list_all(limit=RECENT_ORDER_LIMIT),
        )
