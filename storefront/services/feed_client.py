# storefront/services/feed_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class FeedClient:
    """Downloads catalog exports (CSV) published over HTTP."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    @http_retry()
    def fetch_text(self, url: str) -> str:
        logger.info(f"FeedClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        resp.encoding = resp.encoding or "utf-8"
        return resp.text
