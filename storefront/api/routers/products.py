# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductIn, ProductOut, ProductUpdate, VariantOut
from storefront.services.catalog_service import CatalogService
from storefront.services.inventory_service import InventoryService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(product_id)
    except StorefrontError as e:
        raise to_http(e)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        return CatalogService(db).create_product(payload.model_dump())
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        return CatalogService(db).update_product(product_id, payload.model_dump(exclude_unset=True))
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        CatalogService(db).delete_product(product_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)
    return Response(status_code=204)


@router.get("/{product_id}/variants", response_model=List[VariantOut])
def list_variants(product_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).list_variants(product_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{product_id}/variants/lookup", response_model=VariantOut)
def find_variant(
    product_id: int,
    size: str = Query(...),
    color: str = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return InventoryService(db).find_variant(product_id, size, color)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{product_id}/variants/first-available", response_model=VariantOut)
def first_available_variant(product_id: int, db: Session = Depends(get_db)):
    """Variant used by quick add: first one with stock left."""
    try:
        return InventoryService(db).first_available_variant(product_id)
    except StorefrontError as e:
        raise to_http(e)
