# cartify/models/order.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON, UniqueConstraint
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Immutable order fact.

    - user_id is a plain string correlation to users.user_id (no FK).
    - items store only {name, quantity}; there is no product id.
    - idempotency_key / payment_id are set only by the server-side
      checkout; orders created through POST /orders leave them empty.
    """

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_orders_user_idem"),
    )

    id: int | None = Field(default=None, primary_key=True)

    order_id: str = Field(
        unique=True,
        index=True,
        description="Public order id: ORD<millis>",
    )

    user_id: str = Field(index=True)
    user_name: str

    items: list[dict[str, Any]] = Field(
        sa_column=Column(JSON, nullable=False),
    )

    bill_amount: float

    payment_id: str | None = Field(default=None)
    idempotency_key: str | None = Field(default=None, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )
