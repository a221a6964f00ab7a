# storefront/api/routers/health.py
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from storefront.domain.schemas import HealthOut

router = APIRouter(tags=["health"])

STARTED_AT = time.monotonic()


def uptime_seconds() -> int:
    return int(time.monotonic() - STARTED_AT)


@router.get("/health", response_model=HealthOut)
def health():
    return {
        "status": "healthy",
        "uptime": uptime_seconds(),
        "timestamp": datetime.now(timezone.utc),
    }
