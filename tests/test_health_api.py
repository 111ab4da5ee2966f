"""Tests for health check API endpoints."""

from unittest.mock import patch

from flask.testing import FlaskClient


class TestHealthEndpoints:
    """Test health check endpoints for Kubernetes probes."""

    def test_healthz_always_returns_200(self, client: FlaskClient):
        response = client.get("/health/healthz")

        assert response.status_code == 200
        assert response.json["status"] == "alive"
        assert response.json["ready"] is True

    def test_readyz_when_ready(self, client: FlaskClient):
        with patch("fresh_grocery.database.check_db_connection", return_value=True), \
             patch("fresh_grocery.database.get_pending_migrations", return_value=[]):
            response = client.get("/health/readyz")

        assert response.status_code == 200
        assert response.json["status"] == "ready"
        assert response.json["ready"] is True
        assert response.json["database"]["ok"] is True

    def test_readyz_when_database_unreachable(self, client: FlaskClient):
        with patch("fresh_grocery.database.check_db_connection", return_value=False):
            response = client.get("/health/readyz")

        assert response.status_code == 503
        assert response.json["ready"] is False
        assert response.json["database"]["connected"] is False

    def test_readyz_when_migrations_pending(self, client: FlaskClient):
        with patch("fresh_grocery.database.check_db_connection", return_value=True), \
             patch("fresh_grocery.database.get_pending_migrations", return_value=["002"]):
            response = client.get("/health/readyz")

        assert response.status_code == 503
        assert response.json["database"]["migrations_pending"] == 1

    def test_readyz_against_test_database(self, client: FlaskClient):
        """The test database is stamped at head, so nothing is pending."""
        response = client.get("/health/readyz")

        assert response.status_code == 200

    def test_health_endpoints_need_no_token(self, client: FlaskClient):
        assert client.get("/health/healthz").status_code == 200
