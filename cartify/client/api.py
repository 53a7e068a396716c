# cartify/client/api.py
import logging
from typing import Any

import httpx

from cartify.client.session import SessionStore

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """A non-2xx answer from the API, carrying the server's message."""

    def __init__(self, status_code: int, message: str, kind: str | None = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.kind = kind
        self.body = body


class StorefrontClient:
    """
    Thin wrapper over the REST API.

    Usage:

        session = SessionStore(path=Path("~/.cartify.json").expanduser()).load()
        client = StorefrontClient(httpx.Client(base_url="http://localhost:8000"), session)
        client.login("a@b.com", "secret")
        client.get_cart()

    The bearer token is taken from `session` on every call, so logging
    in or out through the session is immediately visible here.
    """

    def __init__(self, http: httpx.Client, session: SessionStore, prefix: str = "/api"):
        self.http = http
        self.session = session
        self.prefix = prefix

    # ---- plumbing ----

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = dict(extra or {})
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = self.http.request(
            method,
            f"{self.prefix}{path}",
            json=json,
            params=params,
            headers=self._headers(headers),
        )
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = None
        message = (body or {}).get("message") if isinstance(body, dict) else None
        kind = body.get("kind") if isinstance(body, dict) else None
        logger.debug("%s %s -> %s %s", method, path, response.status_code, message)
        raise StorefrontError(
            response.status_code,
            message or response.reason_phrase,
            kind,
            body,
        )

    # ---- auth ----

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self.session.remember(data)
        self.session.save()
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.session.remember(data)
        self.session.save()
        return data

    def admin_login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/admin/login", json={"email": email, "password": password}
        )
        self.session.remember(data)
        self.session.save()
        return data

    def change_password(self, email: str, current: str, new: str) -> dict[str, Any]:
        return self._request(
            "POST", "/auth/change-password",
            json={"email": email, "currentPassword": current, "newPassword": new},
        )

    def logout(self) -> None:
        self.session.clear()

    # ---- catalog ----

    def list_products(self, page: int = 1, limit: int = 12) -> dict[str, Any]:
        return self._request("GET", "/products", params={"page": page, "limit": limit})

    def get_product(self, product_id: int) -> dict[str, Any]:
        return self._request("GET", f"/products/{product_id}")

    def update_quantities(self, items: list[dict[str, int]]) -> dict[str, Any]:
        return self._request("POST", "/products/update-quantities", json={"items": items})

    # ---- cart ----

    def _store_cart(self, data: dict[str, Any]) -> dict[str, Any]:
        self.session.cart = data.get("cart", [])
        self.session.save()
        return data

    def get_cart(self) -> list[dict[str, Any]]:
        return self._store_cart(self._request("GET", "/cart"))["cart"]

    def set_cart_line(self, line: dict[str, Any]) -> list[dict[str, Any]]:
        return self._store_cart(self._request("POST", "/cart/add", json=line))["cart"]

    def increment_cart_line(self, product: dict[str, Any]) -> dict[str, Any]:
        return self._store_cart(self._request("POST", "/cart/increment", json=product))

    def sync_cart(self, lines: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return self._store_cart(
            self._request("POST", "/cart/sync", json={"items": lines})
        )["cart"]

    def remove_cart_line(self, product_id: int) -> list[dict[str, Any]]:
        return self._store_cart(self._request("DELETE", f"/cart/remove/{product_id}"))["cart"]

    def clear_cart(self) -> dict[str, Any]:
        return self._store_cart(self._request("DELETE", "/cart/clear"))

    # ---- orders ----

    def create_order(self, order: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/orders", json=order)

    def list_orders(self, user_id: str | None = None) -> list[dict[str, Any]]:
        user_id = user_id or self.session.user_id
        return self._request("GET", f"/orders/user/{user_id}")["orders"]

    def get_order(self, order_id: str) -> dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}")["order"]

    def checkout(
        self,
        payment_id: str,
        idempotency_key: str,
        gift_card_code: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"paymentId": payment_id}
        if gift_card_code:
            body["giftCardCode"] = gift_card_code
        data = self._request(
            "POST", "/checkout",
            json=body,
            headers={"Idempotency-Key": idempotency_key},
        )
        self.session.cart = []
        self.session.save()
        return data
