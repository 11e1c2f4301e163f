import logging
import threading

logger = logging.getLogger(__name__)


class EventSource(object):
    """
    Delivers events to a list of handlers.

    Subscription is idempotent: adding a handler that is already registered leaves
    a single registration, so components can re-subscribe after a disconnect
    without worrying about duplicate delivery.
    """

    def __init__(self):
        self._handlers = []
        self._lock = threading.RLock()

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return self

    def remove(self, handler):
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return self

    def handlers(self):
        with self._lock:
            return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        # iterate over a snapshot so handlers may (un)subscribe while being notified
        for handler in self.handlers():
            handler(*args, **kwargs)
