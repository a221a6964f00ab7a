# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductWithVariantsOut, RequestLogEntryOut
from storefront.services.catalog_service import CatalogService
from storefront.services.request_log import request_log
from storefront.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


def require_admin(user_id: int = Query(...), db: Session = Depends(get_db)):
    try:
        return UserService(db).require_admin(user_id)
    except (StorefrontError, PermissionError) as e:
        raise to_http(e)


@router.get("/products", response_model=List[ProductWithVariantsOut])
def products_with_variants(
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CatalogService(db).products_with_variants()


@router.get("/logs", response_model=List[RequestLogEntryOut])
def request_logs(admin=Depends(require_admin)):
    """Recent API calls served by this process, newest first."""
    return request_log.entries()
