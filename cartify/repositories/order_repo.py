# cartify/repositories/order_repo.py
from sqlmodel import Session, select

from cartify.models.order import Order


class OrderRepository:
    """
    Data access layer for orders.

    NOTE:
      - create_order() does not commit: during checkout the order insert
        shares a transaction with the stock decrement and cart clear.
        The service is responsible for calling session.commit().
    """

    def list_for_user(self, session: Session, user_id: str) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return session.exec(stmt).all()

    def get_by_order_id(self, session: Session, order_id: str) -> Order | None:
        stmt = select(Order).where(Order.order_id == order_id)
        return session.exec(stmt).first()

    def get_by_idempotency_key(
        self,
        session: Session,
        user_id: str,
        key: str,
    ) -> Order | None:
        stmt = select(Order).where(
            Order.user_id == user_id, Order.idempotency_key == key
        )
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order
