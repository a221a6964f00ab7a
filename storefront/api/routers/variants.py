# storefront/api/routers/variants.py
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import VariantIn, VariantOut, VariantUpdate
from storefront.services.catalog_service import CatalogService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/variants", tags=["variants"])


@router.post("/", response_model=VariantOut, status_code=201)
def create_variant(
    payload: VariantIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        return CatalogService(db).create_variant(payload.model_dump())
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.patch("/{variant_id}", response_model=VariantOut)
def update_variant(
    variant_id: int,
    payload: VariantUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        return CatalogService(db).update_variant(variant_id, payload.model_dump(exclude_unset=True))
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.delete("/{variant_id}", status_code=204)
def delete_variant(
    variant_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        UserService(db).require_admin(user_id)
        CatalogService(db).delete_variant(variant_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)
    return Response(status_code=204)
