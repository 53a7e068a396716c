import pytest

from cartify.client.api import StorefrontClient, StorefrontError
from cartify.client.cart import (
    add_product_to_cart,
    cart_count,
    cart_total,
    update_cart_item,
)
from cartify.client.checkout import (
    STEP_CLEAR,
    STEP_ORDER,
    STEP_PAYMENT,
    STEP_STOCK,
    CheckoutFlow,
    PaymentResult,
)
from cartify.client.session import SessionStore


class FakeGateway:
    def __init__(self, success: bool = True, error: str | None = None):
        self.success = success
        self.error = error
        self.charges: list[tuple[float, str]] = []

    def collect(self, amount: float, currency: str) -> PaymentResult:
        self.charges.append((amount, currency))
        if not self.success:
            return PaymentResult(success=False, error=self.error)
        return PaymentResult(success=True, payment_id=f"pay_{len(self.charges)}")


@pytest.fixture
def store(tmp_path):
    return SessionStore(path=tmp_path / "session.json")


@pytest.fixture
def api(client, store):
    api = StorefrontClient(client, store)
    api.register("shopper", "shopper@example.com", "pw")
    return api


def as_dict(product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "price": product.price,
        "image": product.image,
    }


# ============================================================================
# Session store
# ============================================================================

class TestSessionStore:

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "s.json"
        store = SessionStore(path=path)
        store.remember({"token": "t", "user": {"userId": "1", "name": "n", "email": "e"}})
        store.cart = [{"productId": 1, "quantity": 2}]
        store.save()

        loaded = SessionStore(path=path).load()
        assert loaded.token == "t"
        assert loaded.user_id == "1"
        assert loaded.cart == [{"productId": 1, "quantity": 2}]
        assert loaded.logged_in

    def test_clear_removes_file(self, store):
        store.remember({"token": "t", "user": {}})
        store.save()
        store.clear()
        assert not store.logged_in
        assert not store.path.exists()

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("{nope", encoding="utf-8")
        assert SessionStore(path=path).load().token is None

    def test_in_memory_session(self):
        store = SessionStore()
        store.remember({"token": "t", "user": {"userId": "1"}})
        store.save()
        assert SessionStore().load().token is None


# ============================================================================
# API client and cart helpers
# ============================================================================

class TestStorefrontClient:

    def test_register_remembers_user(self, api, store):
        assert store.logged_in
        assert store.name == "shopper"
        assert SessionStore(path=store.path).load().email == "shopper@example.com"

    def test_error_carries_server_message(self, api):
        with pytest.raises(StorefrontError) as exc:
            api.get_product(999)
        assert exc.value.status_code == 404
        assert exc.value.message == "Product not found"
        assert exc.value.kind == "not_found"

    def test_update_cart_item(self, api, store, make_product):
        product = as_dict(make_product(title="Mug", price=4.0))

        cart = update_cart_item(api, product, 3)
        assert cart[0]["quantity"] == 3
        assert store.cart == cart
        assert cart_count(cart) == 3
        assert cart_total(cart) == 12.0

        assert update_cart_item(api, product, 0) == []

    def test_update_cart_item_bounds(self, api, make_product):
        product = as_dict(make_product())
        with pytest.raises(ValueError):
            update_cart_item(api, product, 51)
        with pytest.raises(ValueError):
            update_cart_item(api, product, -1)

    def test_add_product_to_cart_ceiling(self, api, make_product):
        product = as_dict(make_product())
        for _ in range(5):
            cart, message = add_product_to_cart(api, product)
            assert message == ""

        cart, message = add_product_to_cart(api, product)
        assert cart[0]["quantity"] == 5
        assert message == "Maximum quantity reached for this item."

    def test_logout(self, api, store):
        api.logout()
        with pytest.raises(StorefrontError) as exc:
            api.get_cart()
        assert exc.value.status_code == 401


# ============================================================================
# Checkout flows
# ============================================================================

class TestCheckoutFlow:

    def test_step_by_step_success(self, api, store, session, make_product):
        mug = make_product(title="Mug", price=8.0, quantity=10)
        update_cart_item(api, as_dict(mug), 2)
        gateway = FakeGateway()

        result = CheckoutFlow(api, gateway).run()

        assert result.ok
        assert result.completed == [STEP_PAYMENT, STEP_STOCK, STEP_ORDER, STEP_CLEAR]
        assert result.message == f"Payment successful! Order ID: {result.order_id}"
        assert gateway.charges == [(16.0, "INR")]
        assert store.cart == []
        session.refresh(mug)
        assert mug.quantity == 8
        assert api.get_order(result.order_id)["billAmount"] == 16.0

    def test_payment_failure_touches_nothing(self, api, store, session, make_product):
        mug = make_product(quantity=10)
        update_cart_item(api, as_dict(mug), 2)

        result = CheckoutFlow(api, FakeGateway(success=False, error="Card declined")).run()

        assert not result.ok
        assert result.message == "Card declined"
        assert result.completed == []
        session.refresh(mug)
        assert mug.quantity == 10
        assert len(store.cart) == 1

    def test_later_failure_is_not_compensated(self, api, store, session, make_product):
        mug = make_product(quantity=10)
        update_cart_item(api, as_dict(mug), 2)
        store.name = None

        result = CheckoutFlow(api, FakeGateway()).run()

        assert not result.ok
        assert result.completed == [STEP_PAYMENT, STEP_STOCK]
        assert result.message == "Missing required fields"
        # stock stays decremented and the cart is kept
        session.refresh(mug)
        assert mug.quantity == 8
        assert api.list_orders() == []
        assert len(store.cart) == 1

    def test_empty_cart(self, api):
        gateway = FakeGateway()
        result = CheckoutFlow(api, gateway).run()
        assert result.message == "Cart is empty"
        assert gateway.charges == []

    def test_gift_card_lowers_charge(self, api, make_product):
        item = make_product(price=50.0)
        update_cart_item(api, as_dict(item), 2)
        gateway = FakeGateway()

        result = CheckoutFlow(api, gateway).run(gift_card_code="CARTIFYECOMMERCE")

        assert gateway.charges == [(85.0, "INR")]
        assert result.order["billAmount"] == 85.0

    def test_atomic_success(self, api, store, session, make_product):
        mug = make_product(quantity=3)
        update_cart_item(api, as_dict(mug), 3)

        result = CheckoutFlow(api, FakeGateway()).run_atomic(idempotency_key="k1")

        assert result.ok
        assert result.order["paymentId"] == "pay_1"
        assert store.cart == []
        session.refresh(mug)
        assert mug.quantity == 0

    def test_atomic_failure_keeps_everything(self, api, store, session, make_product):
        mug = make_product(quantity=1)
        update_cart_item(api, as_dict(mug), 2)

        result = CheckoutFlow(api, FakeGateway()).run_atomic()

        assert not result.ok
        assert result.message == "Insufficient quantity for product Test Product"
        assert result.completed == [STEP_PAYMENT]
        session.refresh(mug)
        assert mug.quantity == 1
        assert len(store.cart) == 1
