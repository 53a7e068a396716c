# cartify/models/product.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Identity:
      - id: public numeric id, assigned by the storage engine at insert
        (sequential, never reused by a concurrent insert).
    """

    __tablename__ = "products"

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Sequential public product id",
    )

    title: str = Field(
        index=True,
        description="Display title",
    )

    description: str = Field(
        description="Long description",
    )

    image: str = Field(
        description="Image URL",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    quantity: int = Field(
        default=0,
        ge=0,
        description="Units currently in stock",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is shown on the storefront",
    )

    rating: float = Field(
        default=0,
        ge=0,
        le=5,
    )

    category: str | None = Field(
        default=None,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
