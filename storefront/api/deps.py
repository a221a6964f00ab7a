# storefront/api/deps.py
from fastapi import HTTPException

from storefront.domain.errors import CheckoutInProgress, NotFound
from storefront.services.lock_service import LockService


def get_lock_service() -> LockService:
    return LockService()


def to_http(e: Exception) -> HTTPException:
    """Maps core errors onto status codes, the message goes out as detail."""
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, CheckoutInProgress):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))
