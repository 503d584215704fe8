"""HTTP contract tests for the product endpoints."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.product_api.entities.service.product import ProductRepository, ProductTable


class TestListProducts:
    """GET /products"""

    def test_empty_table_returns_empty_array(self, client: TestClient):
        response = client.get("/products")

        assert response.status_code == 200
        assert response.text == "[]"

    def test_lists_products_in_id_order(self, client: TestClient, add_products):
        add_products(3)

        response = client.get("/products")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "name": "Product 0", "price": 10.0},
            {"id": 2, "name": "Product 1", "price": 20.0},
            {"id": 3, "name": "Product 2", "price": 30.0},
        ]

    def test_count_and_start_select_a_window(self, client: TestClient, add_products):
        add_products(5)

        response = client.get("/products", params={"count": 2, "start": 1})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [2, 3]

    @pytest.mark.parametrize(
        "params",
        [
            {"count": "abc"},
            {"count": "0"},
            {"count": "-4"},
            {"start": "xyz"},
            {"start": "-3"},
            {"count": "", "start": ""},
        ],
    )
    def test_malformed_params_fall_back_to_defaults(
        self, client: TestClient, add_products, params
    ):
        add_products(3)

        response = client.get("/products", params=params)

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [1, 2, 3]

    def test_count_is_capped(self, client: TestClient, add_products):
        add_products(12)

        response = client.get("/products", params={"count": 100})

        assert response.status_code == 200
        assert len(response.json()) == 10

    def test_start_past_the_end_returns_empty_array(
        self, client: TestClient, add_products
    ):
        add_products(2)

        response = client.get("/products", params={"start": 50})

        assert response.status_code == 200
        assert response.json() == []


class TestGetProduct:
    """GET /product/{id}"""

    def test_get_existing_product(self, client: TestClient, add_products):
        add_products(1)

        response = client.get("/product/1")

        assert response.status_code == 200
        assert response.json() == {"id": 1, "name": "Product 0", "price": 10.0}

    def test_stored_empty_name_is_returned(self, test_app: FastAPI, client: TestClient):
        database_service = test_app.state.app_dependencies.database_service
        with database_service.session_scope() as db:
            db.add(ProductTable(name="", price=Decimal("5")))

        single = client.get("/product/1")
        listing = client.get("/products")

        assert single.status_code == 200
        assert single.json() == {"id": 1, "name": "", "price": 5.0}
        assert listing.json() == [{"id": 1, "name": "", "price": 5.0}]

    def test_get_nonexistent_product(self, client: TestClient):
        response = client.get("/product/11")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    @pytest.mark.parametrize("bad_id", ["abc", "-1", "1.5", "1e3", "99999999999"])
    def test_invalid_id_is_rejected(self, client: TestClient, bad_id: str):
        response = client.get(f"/product/{bad_id}")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}


class TestCreateProduct:
    """POST /product"""

    def test_create_product(self, client: TestClient):
        response = client.post(
            "/product", json={"name": "test product", "price": 11.72}
        )

        assert response.status_code == 201
        assert response.json() == {"id": 1, "name": "test product", "price": 11.72}

    def test_create_then_get_returns_same_fields(self, client: TestClient):
        created = client.post("/product", json={"name": "widget", "price": 3.5}).json()

        response = client.get(f"/product/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"id": created["id"], "name": "widget", "price": 3.5}

    def test_ids_are_assigned_by_the_store(self, client: TestClient):
        first = client.post("/product", json={"name": "a", "price": 1}).json()
        second = client.post("/product", json={"name": "b", "price": 2}).json()

        assert first["id"] != second["id"]

    def test_id_in_body_is_ignored(self, client: TestClient):
        response = client.post(
            "/product", json={"id": 42, "name": "x", "price": 1.0}
        )

        assert response.status_code == 201
        assert response.json()["id"] == 1

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/product",
            content=b'{"name": "broken", ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request payload"}

    def test_non_object_body(self, client: TestClient):
        response = client.post("/product", json=["name", "price"])

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request payload"}

    @pytest.mark.parametrize(
        ("body", "field"),
        [
            ({"price": 1.0}, "name"),
            ({"name": "", "price": 1.0}, "name"),
            ({"name": "x"}, "price"),
            ({"name": "x", "price": -0.01}, "price"),
            ({"name": "x", "price": 1.234}, "price"),
            ({"name": "x", "price": 123456789.0}, "price"),
            ({"name": "x", "price": "cheap"}, "price"),
        ],
    )
    def test_invalid_payload(self, client: TestClient, body: dict, field: str):
        response = client.post("/product", json=body)

        assert response.status_code == 400
        assert response.json()["error"].startswith(f"{field}:")

    def test_invalid_payload_does_not_insert(self, client: TestClient):
        client.post("/product", json={"name": "x", "price": -5})

        assert client.get("/products").json() == []


class TestUpdateProduct:
    """PUT /product/{id}"""

    def test_update_product(self, client: TestClient, add_products):
        add_products(1)
        original = client.get("/product/1").json()

        response = client.put(
            "/product/1",
            json={"name": "test product - updated name", "price": 11.22},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == original["id"]
        assert updated["name"] != original["name"]
        assert updated["price"] != original["price"]
        assert updated == {
            "id": 1,
            "name": "test product - updated name",
            "price": 11.22,
        }

    def test_update_is_persisted(self, client: TestClient, add_products):
        add_products(1)

        client.put("/product/1", json={"name": "x", "price": 11.22})

        assert client.get("/product/1").json() == {"id": 1, "name": "x", "price": 11.22}

    def test_update_nonexistent_product(self, client: TestClient):
        response = client.put("/product/7", json={"name": "x", "price": 1.0})

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_update_with_malformed_body(self, client: TestClient, add_products):
        add_products(1)

        response = client.put(
            "/product/1",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert client.get("/product/1").json()["name"] == "Product 0"

    def test_update_with_invalid_id(self, client: TestClient):
        response = client.put("/product/abc", json={"name": "x", "price": 1.0})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}


class TestDeleteProduct:
    """DELETE /product/{id}"""

    def test_delete_product(self, client: TestClient, add_products):
        add_products(1)
        assert client.get("/product/1").status_code == 200

        response = client.delete("/product/1")

        assert response.status_code == 200
        assert response.json() == {"result": "success"}
        assert client.get("/product/1").status_code == 404

    def test_delete_nonexistent_product(self, client: TestClient):
        response = client.delete("/product/1")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_delete_twice(self, client: TestClient, add_products):
        add_products(1)

        assert client.delete("/product/1").status_code == 200
        assert client.delete("/product/1").status_code == 404

    def test_delete_with_invalid_id(self, client: TestClient):
        response = client.delete("/product/-1")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}


class TestErrorHandling:
    """Storage and unexpected failures never leak details."""

    def test_storage_error_returns_generic_500(self, client: TestClient):
        error = OperationalError("SELECT", {}, Exception("password leaked in error"))
        with patch.object(ProductRepository, "get", side_effect=error):
            response = client.get("/product/1")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert "leaked" not in response.text

    def test_unexpected_error_returns_generic_500(self, client: TestClient):
        with patch.object(
            ProductRepository, "list_all", side_effect=RuntimeError("kaboom")
        ):
            response = client.get("/products")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert "kaboom" not in response.text

    def test_unexpected_error_keeps_cors_headers(self, client: TestClient):
        with patch.object(
            ProductRepository, "list_all", side_effect=RuntimeError("kaboom")
        ):
            response = client.get("/products", headers={"Origin": "http://localhost:3000"})

        assert response.status_code == 500
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_unknown_route(self, client: TestClient):
        response = client.get("/nonexistent-endpoint")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_request_id_header(self, client: TestClient):
        generated = client.get("/products")
        echoed = client.get("/products", headers={"X-Request-ID": "req-123"})

        assert generated.headers["X-Request-ID"]
        assert echoed.headers["X-Request-ID"] == "req-123"
