"""
Background retention sweep: once at start-up, then every
BOOKING_SWEEP_INTERVAL_SECONDS, on a single daemon thread.
"""
import logging
import threading

from django.conf import settings
from django.db import DatabaseError, close_old_connections

logger = logging.getLogger(__name__)


class RetentionSweeper:

    def __init__(self, interval=None, sweep=None):
        from .services import purge_expired_bookings

        self.interval = interval or settings.BOOKING_SWEEP_INTERVAL_SECONDS
        self.sweep = sweep or purge_expired_bookings
        self._stop = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def run_once(self):
        """One sweep; errors are logged so the next run still happens"""
        try:
            return self.sweep()
        except DatabaseError:
            logger.exception("Retention sweep failed")
            return 0

    def _tick(self):
        close_old_connections()
        try:
            self.run_once()
        finally:
            close_old_connections()

    def _loop(self):
        logger.info("Retention sweeper started", extra={'interval_seconds': self.interval})
        self._tick()
        while not self._stop.wait(self.interval):
            self._tick()
        logger.info("Retention sweeper stopped")

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name='retention-sweeper', daemon=True)
        self._thread.start()

    def stop(self, timeout=None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


_sweeper = None
_sweeper_lock = threading.Lock()


def start_retention_sweeper():
    """Start the process-wide sweeper unless disabled or already running"""
    global _sweeper
    if not settings.BOOKING_SWEEP_ENABLED:
        return None
    with _sweeper_lock:
        if _sweeper is None:
            _sweeper = RetentionSweeper()
        _sweeper.start()
        return _sweeper
