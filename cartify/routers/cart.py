# cartify/routers/cart.py
from typing import Any

from fastapi import APIRouter, Depends
from sqlmodel import Session

from cartify.core.auth import require_auth
from cartify.database import get_session
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.cart import CartLineSet, CartResponse, CartSync, CatalogAdd
from cartify.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

user_repo = UserRepository()
service = CartService(user_repo)


@router.get("", response_model=CartResponse, response_model_exclude_none=True)
def get_my_cart(
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Get the current user's cart lines.

    Auth:
      - Bearer token carrying a userId.
    """
    return service.get_cart(session, claims["userId"])


@router.post("/add", response_model=CartResponse, response_model_exclude_none=True)
def add_or_set_line(
    payload: CartLineSet,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Add a line, or replace the quantity of an existing line.

    Quantity must be within [1, 50].
    """
    return service.add_or_set_line(session, claims["userId"], payload)


@router.post("/increment", response_model=CartResponse)
def add_from_catalog(
    payload: CatalogAdd,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    "Add to cart" from a product listing: +1 up to a ceiling of 5.

    At the ceiling the cart is returned unchanged with an advisory
    `message`.
    """
    return service.add_from_catalog(session, claims["userId"], payload)


@router.post("/sync", response_model=CartResponse, response_model_exclude_none=True)
def sync_cart(
    payload: CartSync,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Merge a list of lines into the stored cart (add-or-set each).
    """
    return service.sync_cart(session, claims["userId"], payload.items)


@router.delete(
    "/remove/{product_id}",
    response_model=CartResponse,
    response_model_exclude_none=True,
)
def remove_cart_line(
    product_id: int,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Remove a product from the cart. Absent products are a no-op.
    """
    return service.remove_line(session, claims["userId"], product_id)


@router.delete("/clear", response_model=CartResponse)
def clear_cart(
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
):
    """
    Empty the cart. Idempotent.
    """
    return service.clear_cart(session, claims["userId"])
