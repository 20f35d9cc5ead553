"""
Fixed-delay scheduling of sync passes.

The first pass runs as soon as the scheduler starts; every following pass is
armed `interval` seconds after the previous one finished, whether it
succeeded or not.
"""

import logging
import threading
from typing import Callable, Optional

from .sync import MirrorSync

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Re-arming timer around MirrorSync.run()"""

    def __init__(
        self,
        sync: MirrorSync,
        interval_seconds: float = 60,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        """
        Args:
            sync: Pass driver to run
            interval_seconds: Delay between the end of a pass and the next one
            timer_factory: threading.Timer compatible factory
        """
        self.sync = sync
        self.interval_seconds = interval_seconds
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._stopped = True
        self.passes = 0

    @property
    def running(self) -> bool:
        return not self._stopped

    def start(self):
        """Run the first pass on the calling thread, then keep re-arming."""
        with self._lock:
            self._stopped = False
        self._tick()

    def stop(self):
        """Cancel the pending pass. A pass already running finishes normally."""
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _tick(self):
        try:
            self.sync.run()
        except Exception:
            logger.exception("An error occurred during Google Drive sync")
        finally:
            self.passes += 1
            self._schedule_next()

    def _schedule_next(self):
        with self._lock:
            if self._stopped:
                return
            self._timer = self._timer_factory(self.interval_seconds, self._tick)
            self._timer.daemon = True
            self._timer.start()
        logger.info(f"Next sync scheduled in {self.interval_seconds} seconds.")
