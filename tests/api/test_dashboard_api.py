"""Tests for the admin dashboard."""

from fresh_grocery.models.order import PaymentStatus
from fresh_grocery.models.subscription import SubscriptionStatus
from tests.testing_utils import make_order, make_product, make_subscription


class TestDashboardService:
    """Aggregates behind the dashboard."""

    def test_empty_store(self, container, session):
        summary = container.dashboard_service().get_summary()

        assert summary.total_products == 0
        assert summary.active_subscriptions == 0
        assert summary.total_revenue == 0
        assert summary.recent_orders == []

    def test_counts_and_revenue(self, container, session):
        make_product(container, name="Spare")
        paid = make_order(container, user_id="customer-1", price="100")
        make_order(container, user_id="customer-2", price="200")
        paused = make_subscription(container, user_id="customer-3")
        container.subscription_service().set_status(paused, SubscriptionStatus.PAUSED)
        container.order_service().update_payment_status(paid.id, PaymentStatus.COMPLETED)

        summary = container.dashboard_service().get_summary()

        assert summary.total_products == 3
        assert summary.active_subscriptions == 2
        assert summary.completed_orders == 1
        assert summary.pending_orders == 1
        assert summary.total_revenue == 700

    def test_recent_orders_limited_to_five(self, container, session):
        for index in range(7):
            make_order(container, user_id=f"customer-{index}")

        summary = container.dashboard_service().get_summary()

        assert len(summary.recent_orders) == 5


class TestDashboardApi:
    """GET /api/admin/dashboard."""

    def test_dashboard(self, client, container, session, admin_headers):
        order = make_order(container, price="100")
        container.order_service().update_payment_status(order.id, PaymentStatus.COMPLETED)
        session.commit()

        response = client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data["total_products"] == 1
        assert data["completed_orders"] == 1
        assert data["total_revenue"] == 700.0
        assert data["recent_orders"][0]["profile"]["id"] == "customer-1"

    def test_requires_admin(self, client, user_headers):
        assert client.get("/api/admin/dashboard", headers=user_headers).status_code == 403
