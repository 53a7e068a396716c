# cartify/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from cartify.database import get_session
from cartify.repositories.order_repo import OrderRepository
from cartify.schemas.order import OrderCreate, OrderEnvelope, OrderList
from cartify.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
service = OrderService(order_repo)


@router.post(
    "",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    """
    Record an order.

    400 with kind=validation when userId/userName/items/billAmount is
    missing; 400 with kind=malformed_items when items is empty or an
    item lacks name/quantity.
    """
    return service.create_order(session, payload)


@router.get("/user/{user_id}", response_model=OrderList)
def list_user_orders(
    user_id: str,
    session: Session = Depends(get_session),
):
    """
    All orders for a user, most recent first.
    """
    return service.get_orders_for_user(session, user_id)


@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: str,
    session: Session = Depends(get_session),
):
    """
    Get a single order by its ORD... id.
    """
    return service.get_order(session, order_id)
