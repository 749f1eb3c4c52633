"""Per-product mutual exclusion for check-then-write sequences.

Availability checks and reservation writes on the same product must not
interleave.  Handlers take the locks of every product they touch, in
sorted order so two multi-product orders can never deadlock.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import structlog

from rentals.domain.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0


class ProductLockRegistry:

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, product_ids: Iterable[str]) -> Iterator[None]:
        """Hold the locks of *product_ids* for the duration of the block.

        Raises ConcurrencyConflictError if any lock is not acquired within
        the timeout.  Locks already taken are released first.
        """
        acquired: list[threading.Lock] = []
        try:
            for product_id in sorted(set(product_ids)):
                lock = self._lock_for(product_id)
                if not lock.acquire(timeout=self._timeout):
                    logger.warning("Product lock timed out", product_id=product_id)
                    raise ConcurrencyConflictError(
                        f"Product {product_id} is being reserved by another request"
                    )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.Lock()
            return lock


# Shared by every handler in the process unless one is injected.
DEFAULT_LOCKS = ProductLockRegistry()
