# storefront/services/request_log.py
import threading
from collections import deque
from datetime import datetime, timezone

from storefront.utils.settings import REQUEST_LOG_SIZE


class RequestLog:
    """
    Last N requests served by this process, for the developer dashboard.
    Bounded, oldest entries are evicted first, empty after a restart.
    """

    def __init__(self, maxlen: int = REQUEST_LOG_SIZE):
        self._entries = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    @property
    def maxlen(self) -> int:
        return self._entries.maxlen

    def record(self, method: str, path: str, status: int, duration_ms: float):
        entry = {
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "timestamp": datetime.now(timezone.utc),
        }
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> list[dict]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._entries))

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        return len(self._entries)


request_log = RequestLog()
