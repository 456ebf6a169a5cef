"""Order endpoints via TestClient."""

import re
from decimal import Decimal

from conftest import ADMIN_ID, CUSTOMER_ID, OTHER_CUSTOMER_ID


def _order_body(items, **extra):
    body = {
        "items": [{"productId": pid, "quantity": qty} for pid, qty in items],
        "shippingAddress": "742 Evergreen Terrace",
        "phone": "+1 555 0100",
        "paymentMethod": "Cash on Delivery",
    }
    body.update(extra)
    return body


def _place(client, items, user_id=CUSTOMER_ID, **extra):
    return client.post("/orders", params={"user_id": user_id}, json=_order_body(items, **extra))


class TestCreateOrder:
    def test_created_order_payload(self, client, make_product, stock_of, cart_quantities):
        pid = make_product(price="60.00", sale_price="50.00", stock=3, name="Smart Watch")
        client.post("/cart", params={"user_id": CUSTOMER_ID}, json={"productId": pid, "quantity": 2})

        resp = _place(client, [(pid, 2)], notes="Ring twice")

        assert resp.status_code == 201
        order = resp.json()
        assert re.fullmatch(r"ORD-\d{13}-\d{3}", order["orderNumber"])
        assert order["status"] == "PENDING"
        assert order["userId"] == CUSTOMER_ID
        assert order["notes"] == "Ring twice"
        assert Decimal(order["itemsPrice"]) == Decimal("100.00")
        assert Decimal(order["taxPrice"]) == Decimal("10.00")
        assert Decimal(order["shippingPrice"]) == Decimal("10.00")
        assert Decimal(order["totalPrice"]) == Decimal("120.00")
        assert order["items"][0]["name"] == "Smart Watch"
        assert Decimal(order["items"][0]["price"]) == Decimal("50.00")
        assert stock_of(pid) == 1
        assert cart_quantities(CUSTOMER_ID) == {}

    def test_empty_items(self, client, count_orders):
        resp = _place(client, [])
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "INVALID_REQUEST"
        assert count_orders() == 0

    def test_missing_shipping_address(self, client, make_product):
        pid = make_product()
        resp = _place(client, [(pid, 1)], shippingAddress="")
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "INVALID_REQUEST"

    def test_over_stock_line_leaves_no_trace(self, client, make_product, stock_of, count_orders, cart_quantities):
        ok = make_product(stock=5)
        short = make_product(stock=1, name="GPU")
        client.post("/cart", params={"user_id": CUSTOMER_ID}, json={"productId": ok, "quantity": 1})

        resp = _place(client, [(ok, 1), (short, 3)])

        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["error"] == "INSUFFICIENT_STOCK"
        assert detail["productId"] == short
        assert detail["productName"] == "GPU"
        assert count_orders() == 0
        assert stock_of(ok) == 5
        assert cart_quantities(CUSTOMER_ID) == {ok: 1}

    def test_missing_product(self, client):
        resp = _place(client, [(31337, 1)])
        assert resp.status_code == 404
        assert "31337" in resp.json()["detail"]["message"]


class TestReadOrders:
    def test_access_control(self, client, make_product):
        pid = make_product()
        order_id = _place(client, [(pid, 1)]).json()["id"]

        own = client.get(f"/orders/{order_id}", params={"user_id": CUSTOMER_ID})
        assert own.status_code == 200
        assert own.json()["user"] == {"id": CUSTOMER_ID, "name": "Alice"}

        as_admin = client.get(f"/orders/{order_id}", params={"user_id": ADMIN_ID})
        assert as_admin.status_code == 200
        assert as_admin.json()["user"]["name"] == "Alice"

        forbidden = client.get(f"/orders/{order_id}", params={"user_id": OTHER_CUSTOMER_ID})
        assert forbidden.status_code == 403
        assert forbidden.json()["detail"]["error"] == "FORBIDDEN"

    def test_missing_order(self, client):
        assert client.get("/orders/777", params={"user_id": ADMIN_ID}).status_code == 404

    def test_my_orders(self, client, make_product):
        pid = make_product(stock=10)
        mine = _place(client, [(pid, 1)]).json()["id"]
        _place(client, [(pid, 1)], user_id=OTHER_CUSTOMER_ID)

        resp = client.get("/orders/my-orders", params={"user_id": CUSTOMER_ID})

        assert resp.status_code == 200
        assert [o["id"] for o in resp.json()] == [mine]

    def test_admin_list(self, client, make_product):
        pid = make_product(stock=10)
        for _ in range(2):
            _place(client, [(pid, 1)])
        _place(client, [(pid, 1)], user_id=OTHER_CUSTOMER_ID)

        resp = client.get("/orders", params={"user_id": ADMIN_ID, "page": 1, "limit": 2})

        assert resp.status_code == 200
        body = resp.json()
        assert len(body["orders"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        # najnowsze pierwsze, ostatnie zlozyl Bob
        assert body["orders"][0]["user"] == {"id": OTHER_CUSTOMER_ID, "name": "Bob"}
        assert body["orders"][1]["user"]["name"] == "Alice"

    def test_list_requires_admin(self, client):
        resp = client.get("/orders", params={"user_id": CUSTOMER_ID})
        assert resp.status_code == 403


class TestOrderStatus:
    def test_admin_sets_any_status(self, client, make_product):
        pid = make_product()
        order_id = _place(client, [(pid, 1)]).json()["id"]

        resp = client.put(f"/orders/{order_id}/status", params={"user_id": ADMIN_ID}, json={"status": "DELIVERED"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "DELIVERED"

        back = client.put(f"/orders/{order_id}/status", params={"user_id": ADMIN_ID}, json={"status": "PENDING"})
        assert back.json()["status"] == "PENDING"

    def test_invalid_status(self, client, make_product):
        pid = make_product()
        order_id = _place(client, [(pid, 1)]).json()["id"]

        resp = client.put(f"/orders/{order_id}/status", params={"user_id": ADMIN_ID}, json={"status": "LOST"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "INVALID_STATUS"

    def test_customer_cannot_change_status(self, client, make_product):
        pid = make_product()
        order_id = _place(client, [(pid, 1)]).json()["id"]

        resp = client.put(f"/orders/{order_id}/status", params={"user_id": CUSTOMER_ID}, json={"status": "CANCELLED"})
        assert resp.status_code == 403

    def test_missing_order(self, client):
        resp = client.put("/orders/404/status", params={"user_id": ADMIN_ID}, json={"status": "SHIPPED"})
        assert resp.status_code == 404
