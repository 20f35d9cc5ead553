"""
Sync-complete notification channel.

The sync engine calls `notify()` after each committed pass; the serving side
subscribes to reload its copy of the index.
"""

import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SyncNotifier:
    """Fire-and-forget broadcast without payload"""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def notify(self):
        """Call every listener once; a failing listener does not stop the rest."""
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception(f"Sync-complete listener {listener!r} failed")
