# cartify/models/user.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlalchemy.ext.mutable import MutableList
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user account.

    Identity:
      - user_id: timestamp-derived string, unique; this is the id carried
        in bearer tokens and used by orders.

    Cart:
      - embedded array of cart lines, owned exclusively by the user:
        {productId, title, price, quantity, image}
      - lines are a snapshot of the product at add time, not live references.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    user_id: str = Field(
        unique=True,
        index=True,
        description="Public user id (timestamp-derived)",
    )

    name: str = Field(
        unique=True,
        index=True,
        description="Display name; unique across users",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email, stored lowercased",
    )

    password_hash: str = Field(
        description="bcrypt hash; never returned to clients",
    )

    cart: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(MutableList.as_mutable(JSON), nullable=False),
    )

    is_admin: bool = Field(default=False)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
