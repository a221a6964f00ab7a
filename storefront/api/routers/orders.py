# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_lock_service, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderCreate, OrderOut, OrderStatusUpdate, OrderWithItemsOut
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, lock_service: LockService):
    return OrderService(db, lock_service=lock_service)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Query(...),
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """
    Checkout: turns the user's cart into an order and empties the cart.
    Sending the same Idempotency-Key again returns the first order.
    """
    svc = get_service(db, lock_service)
    try:
        return svc.place_order(
            user_id=user_id,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            shipping_address=payload.shipping_address,
            idempotency_key=idempotency_key,
        )
    except StorefrontError as e:
        raise to_http(e)


@router.get("/", response_model=List[OrderWithItemsOut])
def list_orders(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """Admins see every order, everybody else only their own."""
    svc = get_service(db, lock_service)
    if UserService(db).is_admin(user_id):
        return svc.list_orders()
    return svc.list_orders(user_id)


@router.get("/{order_id}", response_model=OrderWithItemsOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        return svc.get_order(order_id, user_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(db, lock_service)
    try:
        UserService(db).require_admin(user_id)
        return svc.update_status(order_id, payload.status)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)
