# cartify/schemas/product.py
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from cartify.schemas.base import CamelModel


class ProductCreate(CamelModel):
    """
    Payload for creating a product.

    Presence of the required fields (title, description, image, price,
    quantity) is checked by the service so a missing field yields the
    single "All fields are required" answer; types and ranges are
    checked here.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    rating: float = Field(default=0, ge=0, le=5)
    is_active: bool = True
    category: str | None = None

    @field_validator("title", "description", "image", "category")
    @classmethod
    def strip_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ProductUpdate(CamelModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    rating: float | None = Field(default=None, ge=0, le=5)
    is_active: bool | None = None
    category: str | None = None

    @field_validator("title", "description", "image")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(CamelModel):
    """
    Product representation for clients.
    """

    id: int
    title: str
    description: str
    image: str
    price: float
    quantity: int
    is_active: bool
    rating: float
    category: str | None = None
    created_at: datetime


class ProductPage(CamelModel):
    products: list[ProductRead]
    current_page: int
    total_pages: int
    total_products: int


class ProductEnvelope(CamelModel):
    message: str
    product: ProductRead


class ProductStatusUpdate(CamelModel):
    """Admin toggle for storefront visibility."""

    model_config = ConfigDict(extra="forbid")

    is_active: bool


class StockLine(CamelModel):
    id: int
    quantity: int = Field(gt=0)


class StockUpdateRequest(CamelModel):
    """Body of POST /products/update-quantities."""

    items: list[StockLine] | None = None
