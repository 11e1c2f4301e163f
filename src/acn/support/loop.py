"""
A background daemon thread that repeats a step until stopped.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class AsyncLoop:
    """
    Calls loop() on a daemon thread until stop() is called.
    Subclasses implement loop(), which should wait on `stop_event` between steps so that
    stopping is prompt. An exception raised by a step is logged and the loop carries on.
    """

    def __init__(self, name=None, log=logger):
        self.name = name
        self.stop_event = threading.Event()
        self.background_thread = None
        self.logger = log
        self._lock = threading.Lock()

    def start(self):
        """ Starts the background thread. Calling start() while the thread is running has no effect. """
        with self._lock:
            if self.background_thread is None:
                t = threading.Thread(target=self._run, name=self.name, daemon=True)
                self.background_thread = t
                t.start()

    def loop(self):
        raise NotImplementedError

    def running(self):
        return not self.stop_event.is_set()

    def _run(self):
        while self.running():
            try:
                self.loop()
            except Exception as e:
                self.logger.exception(e)
        self.logger.debug("background thread %s exiting", self.name)

    def stop(self):
        """ Signals the loop to stop, and waits for the thread unless called from the loop itself. """
        self.stop_event.set()
        with self._lock:
            thread = self.background_thread
            self.background_thread = None
        if thread and thread is not threading.current_thread():
            thread.join()
