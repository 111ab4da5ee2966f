"""Tests for the public catalog and admin product endpoints."""

import io

from tests.testing_utils import make_product, make_subscription


class TestProductCatalogApi:
    """Public catalog endpoints."""

    def test_list_products(self, client, container, session):
        make_product(container, name="Milk", price="250", category="Dairy")
        make_product(container, name="Hidden", is_active=False)
        session.commit()

        response = client.get("/api/products")

        assert response.status_code == 200
        data = response.get_json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Milk"
        assert data["items"][0]["price_pkr"] == 250.0

    def test_list_products_by_category(self, client, container, session):
        make_product(container, name="Milk", category="Dairy")
        make_product(container, name="Onions", category="Vegetables")
        session.commit()

        data = client.get("/api/products?category=Vegetables").get_json()

        assert [item["name"] for item in data["items"]] == ["Onions"]

    def test_list_categories(self, client, container, session):
        make_product(container, name="Milk", category="Dairy")
        make_product(container, name="Bread", category="Bakery")
        session.commit()

        data = client.get("/api/products/categories").get_json()

        assert data == {"categories": ["Bakery", "Dairy"]}

    def test_get_product(self, client, container, session):
        product = make_product(container, name="Milk")
        session.commit()

        response = client.get(f"/api/products/{product.id}")

        assert response.status_code == 200
        assert response.get_json()["id"] == product.id

    def test_get_missing_product(self, client):
        response = client.get("/api/products/4242")

        assert response.status_code == 404
        assert response.get_json()["code"] == "RECORD_NOT_FOUND"


class TestAdminProductsApi:
    """Admin product management."""

    def test_create_product(self, client, admin_headers):
        response = client.post(
            "/api/admin/products",
            json={"name": "Desi Ghee", "price_pkr": "1800", "category": "Dairy"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data["name"] == "Desi Ghee"
        assert data["price_pkr"] == 1800.0
        assert data["is_active"] is True

    def test_create_product_rejects_negative_price(self, client, admin_headers):
        response = client.post(
            "/api/admin/products",
            json={"name": "Bad", "price_pkr": "-1", "category": "Dairy"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_create_product_requires_admin(self, client, user_headers):
        response = client.post(
            "/api/admin/products",
            json={"name": "Milk", "price_pkr": "250", "category": "Dairy"},
            headers=user_headers,
        )

        assert response.status_code == 403

    def test_list_includes_inactive(self, client, container, session, admin_headers):
        make_product(container, name="Milk")
        make_product(container, name="Hidden", is_active=False)
        session.commit()

        data = client.get("/api/admin/products", headers=admin_headers).get_json()

        assert data["total"] == 2

    def test_update_product(self, client, container, session, admin_headers):
        product = make_product(container, name="Milk", price="250")
        session.commit()

        response = client.put(
            f"/api/admin/products/{product.id}",
            json={"price_pkr": "275", "is_active": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["price_pkr"] == 275.0
        assert data["is_active"] is False
        assert data["name"] == "Milk"

    def test_delete_product(self, client, container, session, admin_headers):
        product = make_product(container)
        session.commit()

        response = client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)

        assert response.status_code == 204
        assert client.get(f"/api/products/{product.id}").status_code == 404

    def test_delete_product_in_basket_conflicts(self, client, container, session, admin_headers):
        product = make_product(container)
        make_subscription(container, items=[(product, 1)])
        session.commit()

        response = client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.get_json()["code"] == "DEPENDENCY_IN_USE"


class TestProductImportApi:
    """CSV template download and import."""

    CSV = "name,price_pkr,category\nMilk,250,Dairy\nBread,oops,Bakery\n"

    def test_download_template(self, client, admin_headers):
        response = client.get("/api/admin/products/import/template", headers=admin_headers)

        assert response.status_code == 200
        assert response.content_type.startswith("text/csv")
        assert "attachment" in response.headers["Content-Disposition"]
        assert response.get_data(as_text=True).startswith("name,description,price_pkr")

    def test_import_multipart_upload(self, client, admin_headers):
        response = client.post(
            "/api/admin/products/import",
            data={"file": (io.BytesIO(self.CSV.encode()), "products.csv")},
            content_type="multipart/form-data",
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["dry_run"] is False
        assert data["valid_rows"] == 1
        assert data["imported"] == 1
        assert data["errors"] == [{"row": 3, "message": "Invalid price: oops"}]
        assert client.get("/api/products").get_json()["total"] == 1

    def test_import_raw_body_dry_run(self, client, admin_headers):
        response = client.post(
            "/api/admin/products/import?dry_run=true",
            data=self.CSV.encode(),
            content_type="text/csv",
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["dry_run"] is True
        assert data["valid_rows"] == 1
        assert data["imported"] == 0
        assert client.get("/api/products").get_json()["total"] == 0

    def test_import_without_file(self, client, admin_headers):
        response = client.post("/api/admin/products/import", headers=admin_headers)

        assert response.status_code == 400
        assert "No CSV" in response.get_json()["error"]

    def test_import_non_utf8(self, client, admin_headers):
        response = client.post(
            "/api/admin/products/import",
            data=b"name,price_pkr,category\n\xff\xfe,1,x\n",
            content_type="text/csv",
            headers=admin_headers,
        )

        assert response.status_code == 400
