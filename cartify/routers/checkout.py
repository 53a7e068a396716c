# cartify/routers/checkout.py
from typing import Any

from fastapi import APIRouter, Depends, Header, Response, status
from sqlmodel import Session

from cartify.core.auth import require_auth
from cartify.database import get_session
from cartify.repositories.order_repo import OrderRepository
from cartify.repositories.product_repo import ProductRepository
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.order import CheckoutRequest, OrderEnvelope
from cartify.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["Checkout"])

service = CheckoutService(UserRepository(), ProductRepository(), OrderRepository())


@router.post(
    "",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutRequest,
    response: Response,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(require_auth),
    idempotency_key: str | None = Header(default=None),
):
    """
    Turn the current user's cart into an order in one transaction.

    - Idempotency key: `Idempotency-Key` header or `idempotencyKey` body
      field. A replay answers 200 with the original order.
    - 409 (kind=price_changed) when cart snapshots drifted from the
      catalog; the cart is refreshed and the client should re-confirm.
    """
    if idempotency_key and not payload.idempotency_key:
        payload = payload.model_copy(update={"idempotency_key": idempotency_key})

    order, created = service.checkout(session, claims["userId"], payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return OrderEnvelope(order=order)
