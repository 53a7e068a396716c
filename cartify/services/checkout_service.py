# cartify/services/checkout_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from cartify.core.errors import InsufficientStock, NotFound, PriceChanged, ValidationFailed
from cartify.core.pricing import bill_total, gift_card_discount
from cartify.models.order import Order
from cartify.models.user import User
from cartify.repositories.order_repo import OrderRepository
from cartify.repositories.product_repo import ProductRepository
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.order import CheckoutRequest, OrderRead
from cartify.schemas.product import StockLine
from cartify.services.order_service import OrderService
from cartify.services.product_service import ProductService

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Server-side checkout: cart -> stock -> order -> empty cart as one unit.

    Responsibilities:
      - Idempotency: a repeated (user, idempotency_key) returns the
        order already created, with no further side effects
      - Revalidate every cart line against the catalog (exists, active,
        stock, price/title snapshot)
      - Stock decrement, order insert and cart clear share one
        transaction; any failure rolls back all three
    """

    def __init__(
        self,
        user_repo: UserRepository,
        product_repo: ProductRepository,
        order_repo: OrderRepository,
    ):
        self.user_repo = user_repo
        self.product_repo = product_repo
        self.order_repo = order_repo
        self.product_service = ProductService(product_repo)
        self.order_service = OrderService(order_repo)

    def _revalidate(self, session: Session, user: User) -> list[dict]:
        """
        Compare cart snapshots with the live catalog.

        Missing or inactive products and short stock fail outright.
        Drifted price/title refresh the snapshot in the cart and raise
        PriceChanged so the client can show the new total.
        """
        changed: list[dict] = []
        refreshed: list[dict] = []

        for line in user.cart:
            product = self.product_repo.get_by_id(session, line["productId"])
            if not product:
                raise NotFound(f"Product with id {line['productId']} not found")
            if not product.is_active:
                raise ValidationFailed(f"Product {product.title} is no longer available")
            if product.quantity < line["quantity"]:
                raise InsufficientStock(
                    f"Insufficient quantity for product {product.title}",
                    {"productId": product.id},
                )

            if product.price != line["price"] or product.title != line["title"]:
                changed.append(
                    {
                        "productId": product.id,
                        "oldPrice": line["price"],
                        "newPrice": product.price,
                    }
                )
                line = {**line, "price": product.price, "title": product.title}
            refreshed.append(line)

        if changed:
            self.user_repo.save_cart(session, user, refreshed)
            raise PriceChanged(
                "Prices changed since items were added; please review your cart",
                {"changes": changed},
            )
        return refreshed

    def checkout(
        self,
        session: Session,
        user_id: str,
        payload: CheckoutRequest,
    ) -> tuple[OrderRead, bool]:
        """
        Turn the user's cart into an order.

        Returns:
            (order, created): created is False when an earlier checkout
            with the same idempotency key is replayed.
        """
        user = self.user_repo.get_by_user_id(session, user_id)
        if not user:
            raise NotFound("User not found")

        if payload.idempotency_key:
            previous = self.order_repo.get_by_idempotency_key(
                session, user_id, payload.idempotency_key
            )
            if previous:
                logger.info(
                    "Replayed checkout %s -> %s", payload.idempotency_key, previous.order_id
                )
                return OrderRead.model_validate(previous), False

        if not user.cart:
            raise ValidationFailed("Cart is empty")

        discount = gift_card_discount(payload.gift_card_code)
        if payload.gift_card_code and not discount:
            raise ValidationFailed("Invalid gift card code")

        lines = self._revalidate(session, user)
        bill_amount = bill_total(lines, discount)

        try:
            self.product_service.apply_stock_decrement(
                session,
                [StockLine(id=line["productId"], quantity=line["quantity"]) for line in lines],
            )
            order = Order(
                order_id=self.order_service.next_order_id(session),
                user_id=user.user_id,
                user_name=user.name,
                items=[{"name": line["title"], "quantity": line["quantity"]} for line in lines],
                bill_amount=bill_amount,
                payment_id=payload.payment_id,
                idempotency_key=payload.idempotency_key,
            )
            order = self.order_repo.create_order(session, order)
            self.user_repo.save_cart(session, user, [], commit=False)
            session.commit()
        except IntegrityError:
            session.rollback()
            if not payload.idempotency_key:
                raise
            # a concurrent request with the same key committed first
            previous = self.order_repo.get_by_idempotency_key(
                session, user_id, payload.idempotency_key
            )
            if not previous:
                raise
            logger.info(
                "Checkout race on %s resolved to %s",
                payload.idempotency_key,
                previous.order_id,
            )
            return OrderRead.model_validate(previous), False
        except Exception:
            session.rollback()
            logger.warning("Checkout rolled back for user %s", user_id)
            raise

        session.refresh(order)
        logger.info(
            "Checkout %s for user %s: %.2f (payment %s)",
            order.order_id,
            user_id,
            bill_amount,
            payload.payment_id,
        )
        return OrderRead.model_validate(order), True
