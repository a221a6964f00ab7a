#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    CartLineOut,
    QuickAddIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=List[CartLineOut])
def list_cart(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.list_cart(user_id)


@router.post("/items", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_to_cart(
            user_id=user_id,
            product_id=payload.product_id,
            variant_id=payload.variant_id,
            quantity=payload.quantity,
        )
    except StorefrontError as e:
        raise to_http(e)


@router.post("/quick-add", response_model=CartItemOut, status_code=201)
def quick_add(
    payload: QuickAddIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.quick_add(user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)


@router.patch("/items/{cart_item_id}", response_model=CartItemOut)
def update_item(
    cart_item_id: int,
    payload: CartItemUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_quantity(cart_item_id, payload.quantity, user_id=user_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.delete("/items/{cart_item_id}", status_code=204)
def remove_item(
    cart_item_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(cart_item_id, user_id=user_id)
    except PermissionError as e:
        raise to_http(e)
    return Response(status_code=204)


@router.delete("", status_code=204)
def clear_cart(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    svc.clear_cart(user_id)
    return Response(status_code=204)
