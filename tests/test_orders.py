import pytest

from cartify.core.errors import MalformedItems, ValidationFailed
from cartify.repositories.order_repo import OrderRepository
from cartify.schemas.order import OrderCreate
from cartify.services.order_service import OrderService


def order_body(**overrides) -> dict:
    body = {
        "userId": "1700000000000",
        "userName": "alice",
        "items": [{"name": "Mug", "quantity": 2}],
        "billAmount": 20.0,
    }
    body.update(overrides)
    return body


class TestCreateOrder:

    def test_created(self, client):
        resp = client.post("/api/orders", json=order_body())
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["order"]["orderId"].startswith("ORD")
        assert body["order"]["items"] == [{"name": "Mug", "quantity": 2}]
        assert body["order"]["billAmount"] == 20.0

    def test_empty_items_rejected_and_nothing_saved(self, client):
        resp = client.post("/api/orders", json=order_body(items=[]))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "malformed_items"
        assert resp.json()["message"] == "Items must be a non-empty array"

        orders = client.get("/api/orders/user/1700000000000").json()["orders"]
        assert orders == []

    def test_missing_fields_is_validation_kind(self, client):
        body = order_body()
        del body["userName"]
        resp = client.post("/api/orders", json=body)
        assert resp.status_code == 400
        assert resp.json()["kind"] == "validation"
        assert resp.json()["message"] == "Missing required fields"

    @pytest.mark.parametrize(
        "items",
        [
            [{"quantity": 1}],
            [{"name": "Mug"}],
            [{"name": "Mug", "quantity": "two"}],
            ["Mug"],
        ],
    )
    def test_malformed_item(self, client, items):
        resp = client.post("/api/orders", json=order_body(items=items))
        assert resp.status_code == 400
        assert resp.json()["kind"] == "malformed_items"
        assert resp.json()["message"] == "Each item must have a name and quantity"

    def test_order_ids_are_unique(self, client):
        ids = {
            client.post("/api/orders", json=order_body()).json()["order"]["orderId"]
            for _ in range(5)
        }
        assert len(ids) == 5


class TestLookup:

    def test_get_by_order_id(self, client):
        order_id = client.post("/api/orders", json=order_body()).json()["order"]["orderId"]
        resp = client.get(f"/api/orders/{order_id}")
        assert resp.status_code == 200
        assert resp.json()["order"]["orderId"] == order_id

    def test_get_not_found(self, client):
        resp = client.get("/api/orders/ORD0")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Order not found"

    def test_user_orders_most_recent_first(self, client):
        first = client.post("/api/orders", json=order_body(billAmount=1)).json()["order"]
        second = client.post("/api/orders", json=order_body(billAmount=2)).json()["order"]
        client.post("/api/orders", json=order_body(userId="someone-else"))

        orders = client.get("/api/orders/user/1700000000000").json()["orders"]
        assert [o["orderId"] for o in orders] == [second["orderId"], first["orderId"]]


class TestOrderService:

    def test_validate_items_rejects_bool_quantity(self):
        with pytest.raises(MalformedItems):
            OrderService.validate_items([{"name": "Mug", "quantity": True}])

    def test_zero_bill_amount_is_present(self, session):
        service = OrderService(OrderRepository())
        envelope = service.create_order(session, OrderCreate(**order_body(billAmount=0)))
        assert envelope.order.bill_amount == 0

    def test_missing_items_is_validation(self, session):
        service = OrderService(OrderRepository())
        with pytest.raises(ValidationFailed):
            service.create_order(session, OrderCreate(**order_body(items=None)))

    def test_non_finite_numbers_rejected(self, client):
        # NaN / Infinity are valid Python JSON literals; send them raw
        nan_quantity = (
            '{"userId": "u1", "userName": "alice", "billAmount": 5,'
            ' "items": [{"name": "Mug", "quantity": NaN}]}'
        )
        inf_bill = (
            '{"userId": "u1", "userName": "alice", "billAmount": Infinity,'
            ' "items": [{"name": "Mug", "quantity": 1}]}'
        )
        headers = {"Content-Type": "application/json"}

        bad_item = client.post("/api/orders", content=nan_quantity, headers=headers)
        bad_bill = client.post("/api/orders", content=inf_bill, headers=headers)

        assert bad_item.status_code == 400
        assert bad_item.json()["kind"] == "malformed_items"
        assert bad_bill.status_code == 400
        assert bad_bill.json()["message"] == "Bill amount must be a finite number"
        assert client.get("/api/orders/user/u1").json()["orders"] == []

    def test_validate_items_rejects_nan(self):
        with pytest.raises(MalformedItems):
            OrderService.validate_items([{"name": "Mug", "quantity": float("nan")}])
