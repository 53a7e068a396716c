# cartify/services/product_service.py
import logging
import math

from sqlmodel import Session

from cartify.core.config import get_settings
from cartify.core.errors import InsufficientStock, NotFound, ValidationFailed
from cartify.models.product import Product
from cartify.repositories.product_repo import ProductRepository
from cartify.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductPage,
    ProductRead,
    ProductUpdate,
    StockLine,
)

logger = logging.getLogger(__name__)

settings = get_settings()

REQUIRED_PRODUCT_FIELDS = ("title", "description", "image", "price", "quantity")


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - paging (no is_active filter at this layer)
      - required-field and range validation beyond pydantic
      - stock decrement for purchased items
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Reads -----

    def list_products(
        self,
        session: Session,
        page: int | None = None,
        limit: int | None = None,
    ) -> ProductPage:
        """
        One page of products in insertion order.

        Non-positive or missing page/limit fall back to 1 / DEFAULT_PAGE_SIZE.
        """
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_SIZE
        skip = (page - 1) * limit

        total = self.repo.count(session)
        products = self.repo.list_page(session, skip=skip, limit=limit)

        return ProductPage(
            products=[ProductRead.model_validate(p) for p in products],
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_products=total,
        )

    def list_all(self, session: Session) -> list[ProductRead]:
        return [ProductRead.model_validate(p) for p in self.repo.list_all(session)]

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    # ----- Writes -----

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> ProductEnvelope:
        """
        Create a new product; the storage engine assigns the next id.
        """
        missing = [f for f in REQUIRED_PRODUCT_FIELDS if getattr(payload, f) is None]
        if missing:
            raise ValidationFailed("All fields are required", {"missing": missing})

        product = Product(
            title=payload.title,
            description=payload.description,
            image=payload.image,
            price=payload.price,
            quantity=payload.quantity,
            rating=payload.rating,
            is_active=payload.is_active,
            category=payload.category,
        )
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.id, product.title)
        return ProductEnvelope(
            message="Product created",
            product=ProductRead.model_validate(product),
        )

    def update_product(
        self,
        session: Session,
        product_id: int,
        payload: ProductUpdate,
    ) -> ProductEnvelope:
        """
        Partial update of a product.

        Only fields present in the payload are touched; ranges were
        already validated by the schema. Last write wins.
        """
        product = self.get_product(session, product_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_PRODUCT_FIELDS + ("is_active", "rating"):
                raise ValidationFailed(f"{field} cannot be null")
            setattr(product, field, value)

        product = self.repo.update(session, product)
        return ProductEnvelope(
            message="Product updated",
            product=ProductRead.model_validate(product),
        )

    def set_active(
        self,
        session: Session,
        product_id: int,
        is_active: bool,
    ) -> ProductRead:
        product = self.get_product(session, product_id)
        product.is_active = is_active
        return ProductRead.model_validate(self.repo.update(session, product))

    def delete_product(
        self,
        session: Session,
        product_id: int,
    ) -> ProductEnvelope:
        product = self.get_product(session, product_id)
        snapshot = ProductRead.model_validate(product)
        self.repo.delete(session, product)
        return ProductEnvelope(message="Product deleted", product=snapshot)

    # ----- Stock -----

    def apply_stock_decrement(
        self,
        session: Session,
        items: list[StockLine],
    ) -> None:
        """
        Subtract purchased quantities inside the caller's transaction.

        Stops at the first unknown product or short line. Does not
        commit or roll back; see decrement_stock() for the standalone
        all-or-nothing version.

        Raises:
            NotFound(404): a line names an unknown product id.
            InsufficientStock(400): product.quantity < requested.
        """
        for item in items:
            product = self.repo.get_by_id(session, item.id)
            if not product:
                raise NotFound(f"Product with id {item.id} not found")

            if not self.repo.try_decrement(session, item.id, item.quantity):
                raise InsufficientStock(
                    f"Insufficient quantity for product {product.title}",
                    {"productId": item.id},
                )

    def decrement_stock(
        self,
        session: Session,
        items: list[StockLine] | None,
    ) -> None:
        """
        Decrement stock for every purchased line as one unit.

        Either every line is applied or none is: a failure on any line
        rolls back the lines before it.
        """
        if items is None:
            raise ValidationFailed("Invalid request format")

        try:
            self.apply_stock_decrement(session, items)
        except Exception:
            session.rollback()
            logger.warning("Stock decrement rolled back for items %s", items)
            raise

        session.commit()
        logger.info("Decremented stock for %d line(s)", len(items))
