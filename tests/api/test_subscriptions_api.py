"""Tests for customer and admin subscription endpoints."""

from tests.testing_utils import make_product, make_subscription


class TestSubscriptionsApi:
    """Customer subscription endpoints."""

    def test_create_subscription(self, client, user_headers):
        response = client.post("/api/subscriptions", json={"type": "monthly"}, headers=user_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert data["user_id"] == "customer-1"
        assert data["type"] == "monthly"
        assert data["status"] == "active"
        assert data["total_pkr"] == 0
        assert data["items"] == []

    def test_create_defaults_to_weekly(self, client, user_headers):
        response = client.post("/api/subscriptions", json={}, headers=user_headers)

        assert response.status_code == 201
        assert response.get_json()["type"] == "weekly"

    def test_create_rejects_unknown_type(self, client, user_headers):
        response = client.post("/api/subscriptions", json={"type": "daily"}, headers=user_headers)

        assert response.status_code == 400

    def test_list_with_current(self, client, container, session, user_headers):
        first = make_subscription(container)
        make_subscription(container, user_id="customer-2")
        session.commit()

        data = client.get("/api/subscriptions", headers=user_headers).get_json()

        assert data["total"] == 1
        assert data["current_id"] == first.id

    def test_list_empty(self, client, user_headers):
        data = client.get("/api/subscriptions", headers=user_headers).get_json()

        assert data == {"items": [], "total": 0, "current_id": None}

    def test_other_users_subscription_forbidden(self, client, container, session, user_headers):
        subscription = make_subscription(container, user_id="customer-2")
        session.commit()

        response = client.get(f"/api/subscriptions/{subscription.id}", headers=user_headers)

        assert response.status_code == 403

    def test_admin_can_view_any_subscription(self, client, container, session, admin_headers):
        subscription = make_subscription(container, user_id="customer-2")
        session.commit()

        response = client.get(f"/api/subscriptions/{subscription.id}", headers=admin_headers)

        assert response.status_code == 200

    def test_update_type(self, client, container, session, user_headers):
        product = make_product(container, price="100")
        subscription = make_subscription(container, items=[(product, 1)])
        session.commit()

        response = client.put(
            f"/api/subscriptions/{subscription.id}",
            json={"type": "monthly"},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["total_pkr"] == 3000.0

    def test_reactivating_cancelled_conflicts(self, client, container, session, user_headers):
        subscription = make_subscription(container)
        session.commit()
        client.put(
            f"/api/subscriptions/{subscription.id}",
            json={"status": "cancelled"},
            headers=user_headers,
        )

        response = client.put(
            f"/api/subscriptions/{subscription.id}",
            json={"status": "active"},
            headers=user_headers,
        )

        assert response.status_code == 409
        assert response.get_json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_toggle_pause(self, client, container, session, user_headers):
        subscription = make_subscription(container)
        session.commit()

        paused = client.post(f"/api/subscriptions/{subscription.id}/pause", headers=user_headers)
        resumed = client.post(f"/api/subscriptions/{subscription.id}/pause", headers=user_headers)

        assert paused.get_json()["status"] == "paused"
        assert resumed.get_json()["status"] == "active"

    def test_delete(self, client, container, session, user_headers):
        subscription = make_subscription(container)
        session.commit()

        response = client.delete(f"/api/subscriptions/{subscription.id}", headers=user_headers)

        assert response.status_code == 204
        assert client.get(f"/api/subscriptions/{subscription.id}", headers=user_headers).status_code == 404

    def test_quote(self, client, container, session, user_headers):
        product = make_product(container, price="100")
        subscription = make_subscription(container, items=[(product, 2)])
        session.commit()

        data = client.get(f"/api/subscriptions/{subscription.id}/quote", headers=user_headers).get_json()

        assert data["base_total"] == 200.0
        assert data["days"] == 7
        assert data["discount"] == 0.0
        assert data["total"] == 1400.0


class TestSubscriptionItemsApi:
    """Basket endpoints."""

    def test_add_and_list_items(self, client, container, session, user_headers):
        product = make_product(container, name="Milk", price="250")
        subscription = make_subscription(container)
        session.commit()

        response = client.post(
            f"/api/subscriptions/{subscription.id}/items",
            json={"product_id": product.id, "quantity": 2},
            headers=user_headers,
        )

        assert response.status_code == 201
        assert response.get_json()["product"]["name"] == "Milk"

        data = client.get(f"/api/subscriptions/{subscription.id}/items", headers=user_headers).get_json()
        assert data["total"] == 1
        assert data["items"][0]["quantity"] == 2

        total = client.get(f"/api/subscriptions/{subscription.id}", headers=user_headers).get_json()
        assert total["total_pkr"] == 3500.0

    def test_add_rejects_zero_quantity(self, client, container, session, user_headers):
        product = make_product(container)
        subscription = make_subscription(container)
        session.commit()

        response = client.post(
            f"/api/subscriptions/{subscription.id}/items",
            json={"product_id": product.id, "quantity": 0},
            headers=user_headers,
        )

        assert response.status_code == 400

    def test_update_item_quantity(self, client, container, session, user_headers):
        product = make_product(container)
        subscription = make_subscription(container, items=[(product, 1)])
        item_id = subscription.items[0].id
        session.commit()

        response = client.put(
            f"/api/subscriptions/{subscription.id}/items/{item_id}",
            json={"quantity": 5},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["quantity"] == 5

    def test_update_item_to_zero_removes(self, client, container, session, user_headers):
        product = make_product(container)
        subscription = make_subscription(container, items=[(product, 1)])
        item_id = subscription.items[0].id
        session.commit()

        response = client.put(
            f"/api/subscriptions/{subscription.id}/items/{item_id}",
            json={"quantity": 0},
            headers=user_headers,
        )

        assert response.status_code == 204
        data = client.get(f"/api/subscriptions/{subscription.id}/items", headers=user_headers).get_json()
        assert data["total"] == 0

    def test_remove_item(self, client, container, session, user_headers):
        product = make_product(container)
        subscription = make_subscription(container, items=[(product, 1)])
        item_id = subscription.items[0].id
        session.commit()

        response = client.delete(
            f"/api/subscriptions/{subscription.id}/items/{item_id}", headers=user_headers
        )

        assert response.status_code == 204

    def test_cannot_edit_other_users_basket(self, client, container, session, user_headers):
        product = make_product(container)
        subscription = make_subscription(container, user_id="customer-2")
        session.commit()

        response = client.post(
            f"/api/subscriptions/{subscription.id}/items",
            json={"product_id": product.id},
            headers=user_headers,
        )

        assert response.status_code == 403


class TestAdminSubscriptionsApi:
    """Admin subscription endpoints."""

    def test_list_with_profiles(self, client, container, session, admin_headers):
        make_subscription(container, user_id="customer-1")
        make_subscription(container, user_id="customer-2")
        session.commit()

        data = client.get("/api/admin/subscriptions", headers=admin_headers).get_json()

        assert data["total"] == 2
        assert {item["profile"]["id"] for item in data["items"]} == {"customer-1", "customer-2"}

    def test_list_filtered_by_status(self, client, container, session, admin_headers):
        make_subscription(container)
        session.commit()

        data = client.get("/api/admin/subscriptions?status=paused", headers=admin_headers).get_json()

        assert data["total"] == 0

    def test_list_rejects_unknown_status(self, client, admin_headers):
        response = client.get("/api/admin/subscriptions?status=frozen", headers=admin_headers)

        assert response.status_code == 400

    def test_set_status(self, client, container, session, admin_headers):
        subscription = make_subscription(container)
        session.commit()

        response = client.put(
            f"/api/admin/subscriptions/{subscription.id}/status",
            json={"status": "paused"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["status"] == "paused"

    def test_requires_admin(self, client, user_headers):
        assert client.get("/api/admin/subscriptions", headers=user_headers).status_code == 403
