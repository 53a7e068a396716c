# cartify/routers/products.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from cartify.database import get_session
from cartify.repositories.product_repo import ProductRepository
from cartify.schemas.base import MessageResponse
from cartify.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductPage,
    ProductRead,
    ProductUpdate,
    StockUpdateRequest,
)
from cartify.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    page: int | None = None,
    limit: int | None = None,
):
    """
    Paginated product listing.

    - Public endpoint.
    - Sorted by id; inactive products are included.
    """
    return service.list_products(session, page=page, limit=limit)


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product; the next sequential id is assigned on insert.
    """
    return service.create_product(session, payload)


@router.post("/update-quantities", response_model=MessageResponse)
def update_quantities(
    payload: StockUpdateRequest,
    session: Session = Depends(get_session),
):
    """
    Decrement stock for purchased items.

    All-or-nothing: one short or unknown line leaves every product
    untouched.
    """
    service.decrement_stock(session, payload.items)
    return MessageResponse(message="Product quantities updated successfully")


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Get a single product by numeric id.
    """
    return ProductRead.model_validate(service.get_product(session, product_id))


@router.put("/{product_id}", response_model=ProductEnvelope)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Full or partial update of a product.
    """
    return service.update_product(session, product_id, payload)


@router.delete("/{product_id}", response_model=ProductEnvelope)
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Delete a product; the deleted record is echoed back.
    """
    return service.delete_product(session, product_id)
