"""Recurring background sweep for expiring rentals.

``ExpiryScheduler`` owns one daemon thread and the event that stops it.
A sweep runs immediately on start and then every interval.  Sweeps never
overlap: ``run_once`` skips if one is already in flight, whether it was
started by the loop or by a caller.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL_MINUTES = 5.0
_JOIN_TIMEOUT_SECONDS = 30.0


class ExpiryScheduler:

    def __init__(self, sweep: Callable[[], object]) -> None:
        self._sweep = sweep
        self._control = threading.Lock()
        self._tick_guard = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event: threading.Event | None = None
        self._interval_minutes: float | None = None

    # --- Lifecycle ------------------------------------------------------------

    def start(self, interval_minutes: float = DEFAULT_INTERVAL_MINUTES) -> None:
        """Begin sweeping every *interval_minutes*.

        Calling start while running with the same interval is a no-op;
        with a different interval the loop restarts.
        """
        if interval_minutes <= 0:
            raise ValueError("Scheduler interval must be positive")

        with self._control:
            if self._is_alive():
                if self._interval_minutes == interval_minutes:
                    logger.info("Expiry scheduler already running", interval_minutes=interval_minutes)
                    return
                logger.info(
                    "Restarting expiry scheduler",
                    old_interval_minutes=self._interval_minutes,
                    interval_minutes=interval_minutes,
                )
                self._halt()

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._loop,
                args=(stop_event, interval_minutes * 60),
                name="rental-expiry-scheduler",
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            self._interval_minutes = interval_minutes
            thread.start()
            logger.info("Expiry scheduler started", interval_minutes=interval_minutes)

    def stop(self) -> None:
        with self._control:
            if not self._is_alive():
                logger.info("Expiry scheduler is not running")
                return
            self._halt()
            logger.info("Expiry scheduler stopped")

    def is_running(self) -> bool:
        with self._control:
            return self._is_alive()

    @property
    def interval_minutes(self) -> float | None:
        return self._interval_minutes if self.is_running() else None

    # --- Sweeps ---------------------------------------------------------------

    def run_once(self) -> bool:
        """Run one sweep now.  Returns False if one was already running.

        A failing sweep is logged, never raised.
        """
        if not self._tick_guard.acquire(blocking=False):
            logger.warning("Expiry sweep still running, skipping tick")
            return False
        try:
            self._sweep()
        except Exception:
            logger.exception("Expiry sweep failed")
        finally:
            self._tick_guard.release()
        return True

    # --- Internal helpers -----------------------------------------------------

    def _loop(self, stop_event: threading.Event, interval_seconds: float) -> None:
        while not stop_event.is_set():
            self.run_once()
            if stop_event.wait(interval_seconds):
                break

    def _halt(self) -> None:
        # Caller holds self._control.
        assert self._stop_event is not None and self._thread is not None
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=_JOIN_TIMEOUT_SECONDS)
        self._thread = None
        self._stop_event = None
        self._interval_minutes = None

    def _is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
