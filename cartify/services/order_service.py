# cartify/services/order_service.py
import logging
import math
from numbers import Number

from sqlmodel import Session

from cartify.core.errors import MalformedItems, NotFound, ValidationFailed
from cartify.core.ids import timestamp_id
from cartify.models.order import Order
from cartify.repositories.order_repo import OrderRepository
from cartify.schemas.order import OrderCreate, OrderEnvelope, OrderList, OrderRead

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "ORD"


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Validate order payloads (required fields vs. malformed items)
      - Mint unique order ids
      - Persist immutable order records
      - Lookups by order id and by user
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    # -------- Validation --------

    @staticmethod
    def validate_items(items) -> list[dict]:
        """
        Ensure items is a non-empty list of {name, quantity:number}.

        Raises:
            MalformedItems(400)
        """
        if not isinstance(items, list) or len(items) == 0:
            raise MalformedItems("Items must be a non-empty array")

        cleaned: list[dict] = []
        for item in items:
            if not isinstance(item, dict):
                raise MalformedItems("Each item must have a name and quantity")
            name = item.get("name")
            quantity = item.get("quantity")
            # bool is a Number subclass; reject it explicitly
            if (
                not name
                or not isinstance(name, str)
                or isinstance(quantity, bool)
                or not isinstance(quantity, Number)
                or not math.isfinite(quantity)
            ):
                raise MalformedItems("Each item must have a name and quantity")
            cleaned.append({"name": name, "quantity": quantity})
        return cleaned

    # -------- Operations --------

    def next_order_id(self, session: Session) -> str:
        return timestamp_id(
            ORDER_ID_PREFIX,
            lambda oid: self.order_repo.get_by_order_id(session, oid) is not None,
        )

    def create_order(self, session: Session, payload: OrderCreate) -> OrderEnvelope:
        """
        Persist a new order.

        Steps:
          1. Required fields present (userId, userName, items, billAmount).
          2. Items is a non-empty list of {name, quantity}.
          3. Mint ORD<millis> id, insert, commit.
        """
        missing = [
            alias
            for alias, value in (
                ("userId", payload.user_id),
                ("userName", payload.user_name),
                ("items", payload.items),
                ("billAmount", payload.bill_amount),
            )
            if value is None or value == ""
        ]
        if missing:
            logger.info("Rejected order, missing fields: %s", missing)
            raise ValidationFailed("Missing required fields", {"missing": missing})

        if not math.isfinite(payload.bill_amount):
            raise ValidationFailed("Bill amount must be a finite number")

        items = self.validate_items(payload.items)

        order = Order(
            order_id=self.next_order_id(session),
            user_id=payload.user_id,
            user_name=payload.user_name,
            items=items,
            bill_amount=payload.bill_amount,
        )
        order = self.order_repo.create_order(session, order)
        session.commit()
        session.refresh(order)

        logger.info("Created order %s for user %s", order.order_id, order.user_id)
        return OrderEnvelope(order=OrderRead.model_validate(order))

    def get_orders_for_user(self, session: Session, user_id: str) -> OrderList:
        """All orders for a user, most recent first."""
        orders = self.order_repo.list_for_user(session, user_id)
        return OrderList(orders=[OrderRead.model_validate(o) for o in orders])

    def get_order(self, session: Session, order_id: str) -> OrderEnvelope:
        order = self.order_repo.get_by_order_id(session, order_id)
        if not order:
            raise NotFound("Order not found")
        return OrderEnvelope(order=OrderRead.model_validate(order))
