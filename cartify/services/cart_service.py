# cartify/services/cart_service.py
from sqlmodel import Session

from cartify.core.config import get_settings
from cartify.core.errors import NotFound, ValidationFailed
from cartify.models.user import User
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.cart import CartLine, CartLineSet, CartResponse, CatalogAdd

settings = get_settings()

MAX_QUANTITY_MESSAGE = "Maximum quantity reached for this item."


class CartService:
    """
    Business logic for the cart embedded in each User record.

    Responsibilities:
      - add-or-set / remove / clear on the user's cart array
      - one line per productId
      - quantity bounds: [1, CART_LINE_MAX_QUANTITY] for set,
        CART_INCREMENT_CEILING for "add from catalog"
    """

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    # ---- internal helpers ----

    def _get_user(self, session: Session, user_id: str) -> User:
        user = self.user_repo.get_by_user_id(session, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    @staticmethod
    def _to_response(cart: list[dict], message: str | None = None) -> CartResponse:
        return CartResponse(
            cart=[CartLine.model_validate(line) for line in cart],
            message=message,
        )

    @staticmethod
    def _line_dict(line: CartLine) -> dict:
        return {
            "productId": line.product_id,
            "title": line.title,
            "price": line.price,
            "quantity": line.quantity,
            "image": line.image,
        }

    def _check_quantity(self, quantity: int) -> None:
        ceiling = settings.CART_LINE_MAX_QUANTITY
        if quantity < 1 or quantity > ceiling:
            raise ValidationFailed(f"Quantity must be between 1 and {ceiling}")

    @staticmethod
    def _upsert(cart: list[dict], line: dict) -> list[dict]:
        """Replace quantity if productId is present, else append."""
        updated = [dict(existing) for existing in cart]
        for existing in updated:
            if existing["productId"] == line["productId"]:
                existing["quantity"] = line["quantity"]
                return updated
        updated.append(line)
        return updated

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: str) -> CartResponse:
        user = self._get_user(session, user_id)
        return self._to_response(user.cart)

    def add_or_set_line(
        self,
        session: Session,
        user_id: str,
        payload: CartLineSet,
    ) -> CartResponse:
        """
        Set a line's quantity, appending the line if it is new.

        The title/price/image snapshot is stored as sent; an existing
        line keeps its original snapshot and only takes the quantity.
        """
        self._check_quantity(payload.quantity)
        user = self._get_user(session, user_id)
        cart = self._upsert(user.cart, self._line_dict(payload))
        user = self.user_repo.save_cart(session, user, cart)
        return self._to_response(user.cart)

    def sync_cart(
        self,
        session: Session,
        user_id: str,
        lines: list[CartLineSet],
    ) -> CartResponse:
        """Apply add_or_set_line for every line in one write."""
        for line in lines:
            self._check_quantity(line.quantity)
        user = self._get_user(session, user_id)
        cart = user.cart
        for line in lines:
            cart = self._upsert(cart, self._line_dict(line))
        user = self.user_repo.save_cart(session, user, cart)
        return self._to_response(user.cart)

    def add_from_catalog(
        self,
        session: Session,
        user_id: str,
        payload: CatalogAdd,
    ) -> CartResponse:
        """
        "Add to cart" button on a listing.

        - absent line         -> append with quantity 1
        - quantity < ceiling  -> increment by 1
        - quantity >= ceiling -> cart unchanged, advisory message
        """
        user = self._get_user(session, user_id)
        ceiling = settings.CART_INCREMENT_CEILING

        existing = next(
            (line for line in user.cart if line["productId"] == payload.product_id),
            None,
        )
        if existing is None:
            line = CartLine(**payload.model_dump(), quantity=1)
            cart = self._upsert(user.cart, self._line_dict(line))
        elif existing["quantity"] < ceiling:
            cart = self._upsert(
                user.cart,
                {**existing, "quantity": existing["quantity"] + 1},
            )
        else:
            return self._to_response(user.cart, MAX_QUANTITY_MESSAGE)

        user = self.user_repo.save_cart(session, user, cart)
        return self._to_response(user.cart, "")

    def remove_line(
        self,
        session: Session,
        user_id: str,
        product_id: int,
    ) -> CartResponse:
        """Drop the line for product_id; absent lines are a no-op."""
        user = self._get_user(session, user_id)
        cart = [line for line in user.cart if line["productId"] != product_id]
        if len(cart) != len(user.cart):
            user = self.user_repo.save_cart(session, user, cart)
        return self._to_response(user.cart)

    def clear_cart(self, session: Session, user_id: str) -> CartResponse:
        user = self._get_user(session, user_id)
        if user.cart:
            self.user_repo.save_cart(session, user, [])
        return CartResponse(cart=[], message="Cart cleared successfully")
