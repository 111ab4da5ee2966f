"""Tests for admin delivery assignment endpoints."""

from datetime import date, timedelta

from tests.testing_utils import make_assignment, make_order, make_rider


class TestAdminDeliveriesApi:
    """Assigning riders and tracking assignments."""

    def test_assign_rider(self, client, container, session, admin_headers):
        rider = make_rider(container)
        order = make_order(container)
        session.commit()

        response = client.post(
            "/api/admin/deliveries/assign",
            json={"order_id": order.id, "rider_id": rider.id},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "assigned"
        assert data["rider"]["id"] == rider.id
        assert data["order"]["id"] == order.id
        assert data["total_days"] == 7
        assert len(data["daily_deliveries"]) == 7

    def test_assign_with_start_date(self, client, container, session, admin_headers):
        rider = make_rider(container)
        order = make_order(container)
        session.commit()
        start = date.today() + timedelta(days=2)

        data = client.post(
            "/api/admin/deliveries/assign",
            json={"order_id": order.id, "rider_id": rider.id, "start_date": start.isoformat()},
            headers=admin_headers,
        ).get_json()

        assert data["daily_deliveries"][0]["delivery_date"] == start.isoformat()

    def test_assign_unavailable_rider_conflicts(self, client, container, session, admin_headers):
        rider = make_rider(container, approved=False)
        order = make_order(container)
        session.commit()

        response = client.post(
            "/api/admin/deliveries/assign",
            json={"order_id": order.id, "rider_id": rider.id},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.get_json()["code"] == "INVALID_OPERATION"

    def test_create_without_rider(self, client, container, session, admin_headers):
        order = make_order(container)
        session.commit()

        response = client.post(
            "/api/admin/deliveries",
            json={"order_id": order.id, "notes": "Call before arriving"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "pending"
        assert data["rider"] is None
        assert data["daily_deliveries"] == []

    def test_create_twice_conflicts(self, client, container, session, admin_headers):
        order = make_order(container)
        session.commit()
        client.post("/api/admin/deliveries", json={"order_id": order.id}, headers=admin_headers)

        response = client.post("/api/admin/deliveries", json={"order_id": order.id}, headers=admin_headers)

        assert response.status_code == 409
        assert response.get_json()["code"] == "RESOURCE_CONFLICT"

    def test_list_filtered_by_status(self, client, container, session, admin_headers):
        rider = make_rider(container)
        make_assignment(container, rider, customer_id="customer-1")
        container.delivery_service().create_assignment(make_order(container, "customer-2").id)
        session.commit()

        everything = client.get("/api/admin/deliveries", headers=admin_headers).get_json()
        pending = client.get("/api/admin/deliveries?status=pending", headers=admin_headers).get_json()
        bogus = client.get("/api/admin/deliveries?status=lost", headers=admin_headers)

        assert everything["total"] == 2
        assert pending["total"] == 1
        assert bogus.status_code == 400

    def test_update_status(self, client, container, session, admin_headers):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        session.commit()

        response = client.put(
            f"/api/admin/deliveries/{assignment.id}/status",
            json={"status": "cancelled", "notes": "Customer moved"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "cancelled"
        assert data["notes"] == "Customer moved"

    def test_illegal_status_conflicts(self, client, container, session, admin_headers):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        session.commit()

        response = client.put(
            f"/api/admin/deliveries/{assignment.id}/status",
            json={"status": "completed"},
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.get_json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_missing_assignment(self, client, admin_headers):
        assert client.get("/api/admin/deliveries/999", headers=admin_headers).status_code == 404

    def test_requires_admin(self, client, rider_headers, container, session):
        make_rider(container)
        session.commit()

        assert client.get("/api/admin/deliveries", headers=rider_headers).status_code == 403
