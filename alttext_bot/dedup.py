"""Process-wide idempotency cache for webhook events."""

import logging
import threading
from collections import OrderedDict

logger = logging.getLogger(__name__)


class EventDeduplicator:
    """Bounded FIFO set of event fingerprints.

    The first `should_process` call for a fingerprint claims it and returns
    True; later calls return False until the entry is released or evicted.
    Once more than `max_size` fingerprints are held, the oldest insertions
    are dropped first. Lookups do not refresh an entry's position.
    """

    def __init__(self, max_size: int = 1000):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._entries: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: str) -> bool:
        with self._lock:
            return fingerprint in self._entries

    def should_process(self, fingerprint: str) -> bool:
        with self._lock:
            if fingerprint in self._entries:
                logger.info(f"Event already processed: {fingerprint}, skipping")
                return False

            self._entries[fingerprint] = None
            while len(self._entries) > self._max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted fingerprint {evicted}")
            return True

    def release(self, fingerprint: str) -> bool:
        """Forget a fingerprint so a redelivery can be processed again."""
        with self._lock:
            if fingerprint not in self._entries:
                return False
            del self._entries[fingerprint]
        logger.info(f"Released fingerprint {fingerprint}")
        return True
