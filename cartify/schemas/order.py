# cartify/schemas/order.py
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from cartify.schemas.base import CamelModel


class OrderItem(CamelModel):
    name: str
    quantity: int | float


class OrderCreate(CamelModel):
    """
    Payload for POST /orders.

    Fields are loosely typed on purpose: the service distinguishes
    "missing required fields" from "malformed items" and answers
    each with its own error kind.
    """

    user_id: str | None = None
    user_name: str | None = None
    items: Any = None
    bill_amount: float | None = None

    @field_validator("user_id", "user_name", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v


class OrderRead(CamelModel):
    order_id: str
    user_id: str
    user_name: str
    items: list[OrderItem]
    bill_amount: float
    payment_id: str | None = None
    created_at: datetime


class OrderEnvelope(CamelModel):
    success: bool = True
    order: OrderRead


class OrderList(CamelModel):
    success: bool = True
    orders: list[OrderRead]


class CheckoutRequest(CamelModel):
    """
    Payload for the server-side checkout.

    - payment_id: opaque id returned by the payment provider
    - idempotency_key: client-generated; repeating a key returns the
      order already created for it
    """

    payment_id: str = Field(min_length=1)
    idempotency_key: str | None = Field(default=None, max_length=128)
    gift_card_code: str | None = None
