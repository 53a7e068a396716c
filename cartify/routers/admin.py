# cartify/routers/admin.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from cartify.core.auth import require_admin
from cartify.database import get_session
from cartify.repositories.product_repo import ProductRepository
from cartify.repositories.user_repo import UserRepository
from cartify.schemas.product import ProductRead, ProductStatusUpdate
from cartify.schemas.user import AdminAuthResponse, LoginRequest, UserRead
from cartify.services.product_service import ProductService
from cartify.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])

user_service = UserService(UserRepository())
product_service = ProductService(ProductRepository())


@router.post("/login", response_model=AdminAuthResponse)
def admin_login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Dashboard login.

    - Built-in admin credentials -> 1-day admin token.
    - Any other account -> normal password check, isAdmin from the record.
    """
    return user_service.admin_login(session, payload)


@router.get(
    "/users",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
def list_users(session: Session = Depends(get_session)):
    """
    List all users without password hashes (admin only).
    """
    return user_service.list_users(session)


@router.get(
    "/products",
    response_model=list[ProductRead],
    dependencies=[Depends(require_admin)],
)
def list_products(session: Session = Depends(get_session)):
    """
    List every product, active or not (admin only).
    """
    return product_service.list_all(session)


@router.patch(
    "/products/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def set_product_status(
    product_id: int,
    payload: ProductStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Show or hide a product on the storefront (admin only).
    """
    return product_service.set_active(session, product_id, payload.is_active)
