# cartify/repositories/user_repo.py
from typing import Any

from sqlmodel import Session, select

from cartify.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_user_id(self, session: Session, user_id: str) -> User | None:
        """Return a User by public user id, or None if not found."""
        stmt = select(User).where(User.user_id == user_id)
        return session.exec(stmt).first()

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_by_name(self, session: Session, name: str) -> User | None:
        stmt = select(User).where(User.name == name)
        return session.exec(stmt).first()

    def list_all(self, session: Session) -> list[User]:
        stmt = select(User).order_by(User.id)
        return session.exec(stmt).all()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    # ----- Embedded cart -----

    def save_cart(
        self,
        session: Session,
        user: User,
        cart: list[dict[str, Any]],
        *,
        commit: bool = True,
    ) -> User:
        """
        Replace the embedded cart array.

        Always assigns a fresh list so the JSON column is flagged dirty.
        With commit=False the change joins the caller's transaction.
        """
        user.cart = [dict(line) for line in cart]
        session.add(user)
        if commit:
            session.commit()
            session.refresh(user)
        return user
