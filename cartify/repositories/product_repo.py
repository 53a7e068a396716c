# cartify/repositories/product_repo.py
from sqlalchemy import func, update
from sqlmodel import Session, select

from cartify.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        return session.exec(stmt).one()

    def list_page(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 12,
    ) -> list[Product]:
        """Insertion order (id ascending), no is_active filter."""
        stmt = select(Product).order_by(Product.id).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def list_all(self, session: Session) -> list[Product]:
        stmt = select(Product).order_by(Product.id)
        return session.exec(stmt).all()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    def try_decrement(self, session: Session, product_id: int, amount: int) -> bool:
        """
        Conditionally subtract `amount` from stock.

        Single UPDATE ... WHERE quantity >= amount, so two writers can
        never both take the last units. No commit here; the caller owns
        the transaction.

        Returns:
            True if the row was decremented, False if stock was short
            (or the product vanished).
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.quantity >= amount)
            .values(quantity=Product.quantity - amount)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount == 1
