"""
Sends one logical request at a time to the master and delivers its outcome through a future.
"""
import logging
import threading
from enum import Enum

from acn.errors import RequestTimeoutError, as_transport_error, translate_fault
from acn.protocol.futures import FutureValue
from acn.protocol.master import Master
from acn.support.events import EventSource

logger = logging.getLogger(__name__)


class RequestKind(Enum):
    READ_OBJECT = 'read_object'
    WRITE_OBJECT = 'write_object'
    COMMAND = 'command'
    READ_HOLDING_REGISTERS = 'read_holding_registers'
    WRITE_HOLDING_REGISTERS = 'write_multiple_registers'
    REPORT_SLAVE_ID = 'report_slave_id'


class Request:
    """
    :param kind: the master operation used to send the request
    :param target: the object id, command id or register address
    :param payload: the bytes sent with the request
    :param length: the number of registers read by a holding register read
    :param timeout: seconds to wait for the outcome, None to use the dispatcher's default
    """
    def __init__(self, kind: RequestKind, target=None, payload=b'', length=None, timeout=None):
        self.kind = kind
        self.target = target
        self.payload = bytes(payload)
        self.length = length
        self.timeout = timeout

    def __repr__(self):
        return 'Request(%s, target=%r, payload=%s, length=%r, timeout=%r)' % \
            (self.kind.name, self.target, self.payload.hex(), self.length, self.timeout)


class FutureResponse(FutureValue):
    """ Relates a request and its future response. """

    def __init__(self, request: Request):
        super().__init__()
        self._request = request

    @property
    def request(self):
        return self._request


class Dispatcher:
    """
    Issues requests to a master.

    Each request makes exactly one call to the master. The returned FutureResponse resolves
    with the raw response, or is rejected with the translated error. Requests are not retried.

    Listeners on `request_handlers` receive each FutureResponse as it is dispatched.

    :param master: the master that sends requests to the device
    :param default_timeout: seconds to wait for requests that don't give their own timeout.
        None or 0 waits indefinitely.
    """

    def __init__(self, master: Master, default_timeout=None, timer_factory=threading.Timer):
        self.master = master
        self.default_timeout = default_timeout
        self.timer_factory = timer_factory
        self.request_handlers = EventSource()

    def dispatch(self, request: Request) -> FutureResponse:
        future = FutureResponse(request)
        self.request_handlers.fire(future)
        self._start_timer(future)
        callback = self._completion(future)
        try:
            self._send(request, callback)
        except Exception as e:
            logger.debug("request %r failed to send: %s", request, e)
            future.reject(as_transport_error(e))
        return future

    def _send(self, request: Request, callback):
        master = self.master
        kind = request.kind
        if kind is RequestKind.READ_OBJECT:
            master.read_object(request.target, callback)
        elif kind is RequestKind.WRITE_OBJECT:
            master.write_object(request.target, request.payload, callback)
        elif kind is RequestKind.COMMAND:
            master.command(request.target, request.payload, callback)
        elif kind is RequestKind.READ_HOLDING_REGISTERS:
            master.read_holding_registers(request.target, request.length, callback)
        elif kind is RequestKind.WRITE_HOLDING_REGISTERS:
            master.write_multiple_registers(request.target, request.payload, callback)
        elif kind is RequestKind.REPORT_SLAVE_ID:
            master.report_slave_id(callback)
        else:
            raise ValueError("unknown request kind %r" % (kind,))

    @staticmethod
    def _completion(future: FutureResponse):
        """ builds the master callback for a request. Only the first outcome reaches the future. """
        def on_complete(error, response=None):
            fault = translate_fault(error, response)
            if fault is not None:
                future.reject(fault)
            else:
                future.resolve(response)
        return on_complete

    def _start_timer(self, future: FutureResponse):
        timeout = future.request.timeout
        if timeout is None:
            timeout = self.default_timeout
        if not timeout:
            return

        def expire():
            future.reject(RequestTimeoutError("no response to %r within %ss" % (future.request, timeout)))

        timer = self.timer_factory(timeout, expire)
        timer.daemon = True
        future.add_done_callback(lambda f: timer.cancel())
        timer.start()
