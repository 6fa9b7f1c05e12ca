"""Tests for checkout, cancellation and order administration."""

import asyncio

import pytest

from storefront.application.cancel_order import CancelOrderUseCase
from storefront.application.manage_orders import UpdateOrderStatusDTO, UpdateOrderStatusUseCase
from storefront.domain.exceptions import InvalidStatusTransitionError
from storefront.domain.models import OrderStatus, Principal, UserRole
from storefront.infrastructure.db_schema import (
    baskets_tbl, basket_items_tbl, orders_tbl, order_items_tbl,
)
from storefront.infrastructure.repositories import (
    SQLAlchemyCatalogRepository, SQLAlchemyOrderRepository,
)
from storefront.infrastructure.unit_of_work import UnitOfWork

SHIPPING_ADDRESS = {
    "street": "10 Downing Street",
    "city": "London",
    "state": "Westminster",
    "country": "United Kingdom",
    "zip_code": "12345",
}


def checkout_payload(**overrides):
    payload = {
        "shipping_address": dict(SHIPPING_ADDRESS),
        "payment_method": "credit_card",
        "notes": "Leave at the door",
    }
    payload.update(overrides)
    return payload


def add(client, headers, item_id, quantity):
    response = client.post(
        "/api/basket/items", json={"catalog_item_id": item_id, "quantity": quantity}, headers=headers
    )
    assert response.status_code == 200, response.text


def place_order(client, headers):
    return client.post("/api/orders", json=checkout_payload(), headers=headers)


class TestCheckout:
    def test_free_shipping_scenario(self, client, seed, buyer, buyer_headers):
        item_a = seed.item(name="A", price="50.00", stock=5)
        item_b = seed.item(name="B", price="30.00", stock=5)
        add(client, buyer_headers, item_a, 2)
        add(client, buyer_headers, item_b, 1)

        response = place_order(client, buyer_headers)
        assert response.status_code == 201, response.text
        order = response.json()
        assert order["user_id"] == buyer.id
        assert order["status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["subtotal"] == 130.0
        assert order["tax"] == 10.4
        assert order["shipping"] == 0.0
        assert order["total"] == 140.4
        assert order["shipping_address"]["zip_code"] == "12345"
        assert {item["product_name"]: item["quantity"] for item in order["items"]} == {"A": 2, "B": 1}

        assert seed.stock(item_a) == 3
        assert seed.stock(item_b) == 4

    def test_shipping_fee_scenario(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(name="C", price="20.00", stock=5), 1)

        order = place_order(client, buyer_headers).json()
        assert order["subtotal"] == 20.0
        assert order["tax"] == 1.6
        assert order["shipping"] == 10.0
        assert order["total"] == 31.6

    def test_basket_cleared_and_deactivated(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        basket_id = client.get("/api/basket", headers=buyer_headers).json()["id"]

        assert place_order(client, buyer_headers).status_code == 201
        assert seed.count(basket_items_tbl) == 0
        assert seed.row(baskets_tbl, basket_id).is_active is False

        fresh = client.get("/api/basket", headers=buyer_headers).json()
        assert fresh["id"] != basket_id
        assert fresh["items"] == []

    def test_snapshot_survives_price_change(self, client, seed, buyer_headers):
        item_id = seed.item(name="Snapshot", price="12.50", stock=5)
        add(client, buyer_headers, item_id, 2)
        order = place_order(client, buyer_headers).json()

        item = seed.row(order_items_tbl, order["items"][0]["id"])
        assert item.product_name == "Snapshot"
        assert float(item.unit_price) == 12.5

    def test_empty_basket_rejected(self, client, seed, buyer_headers):
        response = place_order(client, buyer_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Корзина пуста"
        assert seed.count(orders_tbl) == 0
        assert seed.count(order_items_tbl) == 0

    def test_insufficient_stock_leaves_no_partial_writes(self, client, seed, buyer_headers):
        plenty = seed.item(name="Plenty", price="10.00", stock=10)
        scarce = seed.item(name="Scarce", price="10.00", stock=5)
        add(client, buyer_headers, plenty, 2)
        add(client, buyer_headers, scarce, 5)
        # Остаток уменьшился после добавления в корзину
        seed.set_stock(scarce, 3)

        response = place_order(client, buyer_headers)
        assert response.status_code == 400
        assert "Scarce" in response.json()["detail"]

        assert seed.count(orders_tbl) == 0
        assert seed.count(order_items_tbl) == 0
        assert seed.stock(plenty) == 10
        assert seed.stock(scarce) == 3
        basket = client.get("/api/basket", headers=buyer_headers).json()
        assert len(basket["items"]) == 2

    def test_lost_decrement_rolls_back_order(self, client, seed, buyer_headers, monkeypatch):
        plenty = seed.item(name="Plenty", price="10.00", stock=10)
        contested = seed.item(name="Contested", price="10.00", stock=5)
        add(client, buyer_headers, plenty, 2)
        add(client, buyer_headers, contested, 1)
        basket_id = client.get("/api/basket", headers=buyer_headers).json()["id"]

        decrement_stock = SQLAlchemyCatalogRepository.decrement_stock

        # Остаток списан параллельным заказом уже после проверки
        async def decrement_or_lose(self, item_id, quantity):
            if item_id == contested:
                return False
            return await decrement_stock(self, item_id, quantity)

        monkeypatch.setattr(SQLAlchemyCatalogRepository, "decrement_stock", decrement_or_lose)

        response = place_order(client, buyer_headers)
        assert response.status_code == 400
        assert "Contested" in response.json()["detail"]

        assert seed.count(orders_tbl) == 0
        assert seed.count(order_items_tbl) == 0
        assert seed.stock(plenty) == 10
        assert seed.stock(contested) == 5
        basket = client.get("/api/basket", headers=buyer_headers).json()
        assert len(basket["items"]) == 2
        assert basket["id"] == basket_id
        assert seed.row(baskets_tbl, basket_id).is_active is True

    def test_inactive_product_rejected(self, client, seed, buyer_headers, admin_headers):
        item_id = seed.item(name="Retired", stock=5)
        add(client, buyer_headers, item_id, 1)
        client.delete(f"/api/catalog/items/{item_id}", headers=admin_headers)

        response = place_order(client, buyer_headers)
        assert response.status_code == 400
        assert "Retired" in response.json()["detail"]
        assert seed.count(orders_tbl) == 0

    def test_requires_authentication(self, client):
        response = client.post("/api/orders", json=checkout_payload())
        assert response.status_code == 401

    def test_address_validation(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        payload = checkout_payload(shipping_address={**SHIPPING_ADDRESS, "zip_code": "ABCDE"})
        response = client.post("/api/orders", json=payload, headers=buyer_headers)
        assert response.status_code == 400
        fields = [error["field"] for error in response.json()["errors"]]
        assert "shipping_address.zip_code" in fields

    def test_unknown_payment_method(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        response = client.post(
            "/api/orders", json=checkout_payload(payment_method="barter"), headers=buyer_headers
        )
        assert response.status_code == 400


class TestCancel:
    def test_cancel_restores_stock(self, client, seed, buyer_headers):
        item_id = seed.item(stock=5)
        add(client, buyer_headers, item_id, 3)
        order = place_order(client, buyer_headers).json()
        assert seed.stock(item_id) == 2

        response = client.put(f"/api/orders/{order['id']}/cancel", headers=buyer_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["payment_status"] == "refunded"
        assert seed.stock(item_id) == 5

    def test_second_cancel_rejected(self, client, seed, buyer_headers):
        item_id = seed.item(stock=5)
        add(client, buyer_headers, item_id, 1)
        order = place_order(client, buyer_headers).json()

        assert client.put(f"/api/orders/{order['id']}/cancel", headers=buyer_headers).status_code == 200
        response = client.put(f"/api/orders/{order['id']}/cancel", headers=buyer_headers)
        assert response.status_code == 409
        assert seed.stock(item_id) == 5

    def test_other_user_forbidden(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        order = place_order(client, buyer_headers).json()
        stranger = seed.auth(seed.user(email="stranger@example.com"))

        response = client.put(f"/api/orders/{order['id']}/cancel", headers=stranger)
        assert response.status_code == 403

    def test_missing_order(self, client, buyer_headers):
        response = client.put("/api/orders/does-not-exist/cancel", headers=buyer_headers)
        assert response.status_code == 404

    def test_processing_order_not_cancellable(self, client, seed, buyer_headers, admin_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        order = place_order(client, buyer_headers).json()
        client.put(f"/api/orders/{order['id']}/status", json={"status": "processing"}, headers=admin_headers)

        response = client.put(f"/api/orders/{order['id']}/cancel", headers=buyer_headers)
        assert response.status_code == 409


class TestReadOrders:
    def test_get_own_order(self, client, seed, buyer_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        order = place_order(client, buyer_headers).json()

        response = client.get(f"/api/orders/{order['id']}", headers=buyer_headers)
        assert response.status_code == 200
        assert response.json()["id"] == order["id"]

    def test_get_foreign_order_forbidden_but_admin_allowed(self, client, seed, buyer_headers, admin_headers):
        add(client, buyer_headers, seed.item(stock=5), 1)
        order = place_order(client, buyer_headers).json()
        stranger = seed.auth(seed.user(email="stranger@example.com"))

        assert client.get(f"/api/orders/{order['id']}", headers=stranger).status_code == 403
        assert client.get(f"/api/orders/{order['id']}", headers=admin_headers).status_code == 200

    def test_my_orders_paginated(self, client, seed, buyer_headers):
        item_id = seed.item(price="5.00", stock=10)
        for _ in range(3):
            add(client, buyer_headers, item_id, 1)
            assert place_order(client, buyer_headers).status_code == 201

        response = client.get("/api/orders/my-orders?limit=2", headers=buyer_headers)
        assert response.status_code == 200
        data = response.json()
        assert len(data["orders"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["total_pages"] == 2
        assert data["pagination"]["has_next"] is True

        other = seed.auth(seed.user(email="other@example.com"))
        assert client.get("/api/orders/my-orders", headers=other).json()["orders"] == []


class TestAdminOrders:
    def _order(self, client, seed, buyer_headers, stock=5, quantity=2):
        item_id = seed.item(stock=stock)
        add(client, buyer_headers, item_id, quantity)
        return place_order(client, buyer_headers).json(), item_id

    def test_list_requires_admin(self, client, buyer_headers, admin_headers):
        assert client.get("/api/orders", headers=buyer_headers).status_code == 403
        assert client.get("/api/orders", headers=admin_headers).status_code == 200

    def test_list_filters_by_status_and_search(self, client, seed, buyer_headers, admin_headers):
        order, _ = self._order(client, seed, buyer_headers)

        data = client.get("/api/orders?status=pending&search=buyer@", headers=admin_headers).json()
        assert [o["id"] for o in data["orders"]] == [order["id"]]

        data = client.get("/api/orders?status=shipped", headers=admin_headers).json()
        assert data["orders"] == []

    def test_shipping_sets_estimated_delivery(self, client, seed, buyer_headers, admin_headers):
        order, _ = self._order(client, seed, buyer_headers)
        response = client.put(
            f"/api/orders/{order['id']}/status",
            json={"status": "shipped", "tracking_number": "TRACK-001"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "shipped"
        assert data["tracking_number"] == "TRACK-001"
        assert data["estimated_delivery_date"] is not None

        data = client.put(
            f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=admin_headers
        ).json()
        assert data["status"] == "delivered"
        assert data["actual_delivery_date"] is not None

    def test_terminal_status_rejected(self, client, seed, buyer_headers, admin_headers):
        order, _ = self._order(client, seed, buyer_headers)
        client.put(f"/api/orders/{order['id']}/status", json={"status": "shipped"}, headers=admin_headers)
        client.put(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=admin_headers)

        response = client.put(
            f"/api/orders/{order['id']}/status", json={"status": "pending"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_admin_cancel_restores_stock(self, client, seed, buyer_headers, admin_headers):
        order, item_id = self._order(client, seed, buyer_headers, stock=5, quantity=2)
        assert seed.stock(item_id) == 3

        response = client.put(
            f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["payment_status"] == "refunded"
        assert seed.stock(item_id) == 5

    def test_admin_cancel_keeps_explicit_payment_status(self, client, seed, buyer_headers, admin_headers):
        order, _ = self._order(client, seed, buyer_headers)
        response = client.put(
            f"/api/orders/{order['id']}/status",
            json={"status": "cancelled", "payment_status": "failed"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["payment_status"] == "failed"

    def test_admin_cancel_after_owner_cancel_restores_once(
        self, client, seed, buyer, buyer_headers, session_factory, monkeypatch
    ):
        order, item_id = self._order(client, seed, buyer_headers, stock=5, quantity=2)
        owner = Principal(user_id=buyer.id, role=UserRole.CUSTOMER)
        update_if_status = SQLAlchemyOrderRepository.update_if_status
        interleaved = []

        # Владелец отменяет заказ между чтением и записью администратора
        async def owner_cancels_first(self, order_id, expected_status, **values):
            if not interleaved:
                interleaved.append(order_id)
                await CancelOrderUseCase(UnitOfWork(session_factory))(order_id, owner)
            return await update_if_status(self, order_id, expected_status, **values)

        monkeypatch.setattr(SQLAlchemyOrderRepository, "update_if_status", owner_cancels_first)

        use_case = UpdateOrderStatusUseCase(UnitOfWork(session_factory))
        with pytest.raises(InvalidStatusTransitionError):
            asyncio.run(use_case(order["id"], UpdateOrderStatusDTO(status=OrderStatus.CANCELLED)))

        assert interleaved == [order["id"]]
        assert seed.stock(item_id) == 5
        row = seed.row(orders_tbl, order["id"])
        assert row.status == "cancelled"
        assert row.payment_status == "refunded"

    def test_status_update_requires_admin(self, client, seed, buyer_headers):
        order, _ = self._order(client, seed, buyer_headers)
        response = client.put(
            f"/api/orders/{order['id']}/status", json={"status": "shipped"}, headers=buyer_headers
        )
        assert response.status_code == 403

    def test_statistics(self, client, seed, buyer_headers, admin_headers):
        first, _ = self._order(client, seed, buyer_headers)
        second, _ = self._order(client, seed, buyer_headers)
        client.put(f"/api/orders/{second['id']}/cancel", headers=buyer_headers)

        response = client.get("/api/orders/admin/statistics", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 2
        assert data["total_revenue"] == round(first["total"] + second["total"], 2)
        by_status = {row["status"]: row["count"] for row in data["orders_by_status"]}
        assert by_status == {"pending": 1, "cancelled": 1}
        assert len(data["recent_orders"]) == 2
