# cartify/client/checkout.py
"""
Checkout orchestration on the client side.

Two ways to check out:

  - CheckoutFlow.run(): the storefront's step-by-step sequence.
    Payment, then three independent API calls (decrement stock,
    create order, clear cart). Each step runs only if the previous one
    succeeded and nothing is undone when a later step fails: payment
    may be captured and stock decremented with no order recorded.
    The result says exactly which steps completed.

  - CheckoutFlow.run_atomic(): payment, then a single POST /checkout
    carrying an idempotency key. Stock, order and cart clear succeed
    or fail together on the server, and retrying with the same key
    cannot create a second order.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol

from cartify.client.api import StorefrontClient, StorefrontError
from cartify.client.cart import cart_total
from cartify.core.pricing import gift_card_discount

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to process order. Please contact support."

STEP_PAYMENT = "payment"
STEP_STOCK = "update_quantities"
STEP_ORDER = "create_order"
STEP_CLEAR = "clear_cart"


@dataclass
class PaymentResult:
    success: bool
    payment_id: str | None = None
    error: str | None = None


class PaymentGateway(Protocol):
    """
    Third-party payment popup.

    Blocks until the user finishes; reports success with an opaque
    payment id, or failure with a message.
    """

    def collect(self, amount: float, currency: str) -> PaymentResult: ...


@dataclass
class CheckoutResult:
    ok: bool
    order: dict[str, Any] | None = None
    message: str = ""
    payment_id: str | None = None
    completed: list[str] = field(default_factory=list)

    @property
    def order_id(self) -> str | None:
        return self.order["orderId"] if self.order else None


class CheckoutFlow:
    def __init__(
        self,
        client: StorefrontClient,
        gateway: PaymentGateway,
        currency: str = "INR",
    ):
        self.client = client
        self.gateway = gateway
        self.currency = currency

    def _pay(self, cart: list[dict[str, Any]], discount: int, result: CheckoutResult) -> bool:
        amount = cart_total(cart, discount)
        payment = self.gateway.collect(amount, self.currency)
        if not payment.success:
            result.message = payment.error or "Payment failed"
            return False
        result.payment_id = payment.payment_id
        result.completed.append(STEP_PAYMENT)
        return True

    def run(self, gift_card_code: str | None = None) -> CheckoutResult:
        """Payment -> update-quantities -> create order -> clear cart."""
        session = self.client.session
        cart = list(session.cart)
        result = CheckoutResult(ok=False)

        if not cart:
            result.message = "Cart is empty"
            return result

        discount = gift_card_discount(gift_card_code)
        if not self._pay(cart, discount, result):
            return result

        try:
            self.client.update_quantities(
                [{"id": line["productId"], "quantity": line["quantity"]} for line in cart]
            )
            result.completed.append(STEP_STOCK)

            created = self.client.create_order(
                {
                    "userId": session.user_id,
                    "userName": session.name,
                    "items": [
                        {"name": line["title"], "quantity": line["quantity"]} for line in cart
                    ],
                    "billAmount": cart_total(cart, discount),
                }
            )
            result.order = created["order"]
            result.completed.append(STEP_ORDER)

            self.client.clear_cart()
            result.completed.append(STEP_CLEAR)
        except StorefrontError as exc:
            logger.error(
                "Checkout stopped after %s (payment %s): %s",
                result.completed, result.payment_id, exc.message,
            )
            result.message = exc.message or GENERIC_FAILURE
            return result

        result.ok = True
        result.message = f"Payment successful! Order ID: {result.order_id}"
        return result

    def run_atomic(
        self,
        gift_card_code: str | None = None,
        idempotency_key: str | None = None,
    ) -> CheckoutResult:
        """Payment -> POST /checkout (one server transaction)."""
        cart = list(self.client.session.cart)
        result = CheckoutResult(ok=False)

        if not cart:
            result.message = "Cart is empty"
            return result

        if not self._pay(cart, gift_card_discount(gift_card_code), result):
            return result

        key = idempotency_key or uuid.uuid4().hex
        try:
            data = self.client.checkout(result.payment_id, key, gift_card_code)
        except StorefrontError as exc:
            logger.error("Atomic checkout failed (payment %s): %s", result.payment_id, exc.message)
            result.message = exc.message or GENERIC_FAILURE
            return result

        result.order = data["order"]
        result.completed.extend([STEP_STOCK, STEP_ORDER, STEP_CLEAR])
        result.ok = True
        result.message = f"Payment successful! Order ID: {result.order_id}"
        return result
