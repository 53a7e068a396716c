# cartify/client/cart.py
from typing import Any

from cartify.client.api import StorefrontClient
from cartify.core.config import get_settings
from cartify.core.pricing import bill_total

settings = get_settings()


def cart_count(cart: list[dict[str, Any]]) -> int:
    """Total units across all lines (the navbar badge)."""
    return sum(line.get("quantity") or 0 for line in cart)


def cart_total(cart: list[dict[str, Any]], discount_percent: int = 0) -> float:
    return bill_total(cart, discount_percent)


def snapshot(product: dict[str, Any]) -> dict[str, Any]:
    """Cart-line fields taken from a catalog product."""
    return {
        "productId": product["id"],
        "title": product["title"],
        "price": product["price"],
        "image": product["image"],
    }


def update_cart_item(
    client: StorefrontClient,
    product: dict[str, Any],
    new_quantity: int,
) -> list[dict[str, Any]]:
    """
    Set a product's quantity in the cart; 0 removes the line.

    Returns the cart as stored on the server.
    """
    ceiling = settings.CART_LINE_MAX_QUANTITY
    if new_quantity < 0 or new_quantity > ceiling:
        raise ValueError(f"Quantity must be between 0 and {ceiling}")

    if new_quantity == 0:
        client.remove_cart_line(product["id"])
    else:
        client.set_cart_line({**snapshot(product), "quantity": new_quantity})
    return client.get_cart()


def add_product_to_cart(
    client: StorefrontClient,
    product: dict[str, Any],
) -> tuple[list[dict[str, Any]], str]:
    """
    "Add to cart" button: one more unit, up to the increment ceiling.

    Returns (cart, message); message is empty unless the ceiling was hit.
    """
    data = client.increment_cart_line(snapshot(product))
    return data["cart"], data.get("message") or ""
