# cartify/schemas/cart.py
from pydantic import Field

from cartify.schemas.base import CamelModel


class CartLine(CamelModel):
    """
    One product entry in a user's cart.

    A snapshot taken when the line was added; price and title are not
    kept in sync with the catalog.
    """

    product_id: int
    title: str
    price: float = Field(ge=0)
    quantity: int
    image: str


class CartLineSet(CartLine):
    """
    Payload for add-or-set.

    Quantity bounds are checked by the service against the configured
    ceiling so the error carries the cart-specific message.
    """

    pass


class CatalogAdd(CamelModel):
    """
    Payload for "add to cart" from a catalog listing: the product
    snapshot without a quantity.
    """

    product_id: int
    title: str
    price: float = Field(ge=0)
    image: str


class CartSync(CamelModel):
    """Bulk add-or-set, used to merge a guest cart after login."""

    items: list[CartLineSet]


class CartResponse(CamelModel):
    cart: list[CartLine]
    message: str | None = None
