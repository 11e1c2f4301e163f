"""
Futures that complete exactly once.

A future may be completed by a master callback, by a timeout timer or by the caller cancelling it.
Whichever comes first wins; later attempts to complete it are ignored.
"""
import logging
from concurrent.futures import Future, InvalidStateError

logger = logging.getLogger(__name__)


class FutureValue(Future):
    """ describes a value that may have not yet been computed. Callers can check if the value has arrived, or chose to
        wait until the value has arrived.
        If an exception is encountered computing the value, it is set."""

    def resolve(self, value):
        """
        completes this future with a value.
        :return: True if this call completed the future, False if it was already complete.
        """
        try:
            self.set_result(value)
            return True
        except InvalidStateError:
            logger.debug("ignoring result for completed future %r", self)
            return False

    def reject(self, error: BaseException):
        """
        completes this future with an error.
        :return: True if this call completed the future, False if it was already complete.
        """
        try:
            self.set_exception(error)
            return True
        except InvalidStateError:
            logger.debug("ignoring error for completed future %r: %s", self, error)
            return False

    def set_result_or_exception(self, value):
        if isinstance(value, BaseException):
            return self.reject(value)
        return self.resolve(value)

    def value(self, timeout=None):
        """ blocks until the value is available, raising the error if the future failed. """
        return self.result(timeout)

    def then(self, fn) -> 'FutureValue':
        """
        Derives a future holding fn applied to this future's result.
        Failures of this future, or exceptions raised by fn, fail the derived future.
        Cancelling the derived future cancels this one.
        """
        derived = FutureValue()

        def chain(source):
            if source.cancelled():
                derived.cancel()
                return
            error = source.exception()
            if error is not None:
                derived.reject(error)
                return
            try:
                derived.resolve(fn(source.result()))
            except Exception as e:
                derived.reject(e)

        def propagate_cancel(d):
            if d.cancelled():
                self.cancel()

        derived.add_done_callback(propagate_cancel)
        self.add_done_callback(chain)
        return derived


def completed(value) -> FutureValue:
    """ a future that already holds a value """
    future = FutureValue()
    future.resolve(value)
    return future


def failed(error) -> FutureValue:
    """ a future that already holds an error """
    future = FutureValue()
    future.reject(error)
    return future
