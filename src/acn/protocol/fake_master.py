"""
A master that answers from a script instead of a serial line. Used by the tests, and handy for
exercising an application without a device attached.
"""
import logging
from collections import deque

from acn.protocol.master import Master, MasterResponse

logger = logging.getLogger(__name__)


class FakeMaster(Master):
    """
    Each request pops the next scripted reply. A reply is either a response, an exception
    (passed as the error), an (error, response) pair, or None to leave the request unanswered.

    Every request is recorded in `calls` as (method name, args).
    """

    def __init__(self, *replies):
        super().__init__()
        self.replies = deque(replies)
        self.calls = []
        self.transport = None
        self.attach_count = 0
        self.set_up_count = 0
        self.destroyed = 0
        self.pending = []

    def reply(self, *replies):
        self.replies.extend(replies)
        return self

    def attach_transport(self, transport):
        self.transport = transport
        self.attach_count += 1

    def set_up_connection(self):
        self.set_up_count += 1

    def destroy(self):
        self.destroyed += 1

    def disconnect(self):
        """ simulates the device going away """
        self.fire_disconnected()

    def _request(self, name, callback, *args):
        self.calls.append((name, args))
        reply = self.replies.popleft() if self.replies else MasterResponse()
        logger.debug("%s%r -> %r", name, args, reply)
        if reply is None:
            self.pending.append(callback)
            return
        if isinstance(reply, BaseException):
            callback(reply, None)
        elif isinstance(reply, tuple):
            callback(*reply)
        else:
            callback(None, reply)

    def read_object(self, object_id, callback):
        self._request('read_object', callback, object_id)

    def write_object(self, object_id, data, callback):
        self._request('write_object', callback, object_id, bytes(data))

    def read_holding_registers(self, address, length, callback):
        self._request('read_holding_registers', callback, address, length)

    def write_multiple_registers(self, address, data, callback):
        self._request('write_multiple_registers', callback, address, bytes(data))

    def command(self, command_id, data, callback):
        self._request('command', callback, command_id, bytes(data))

    def report_slave_id(self, callback):
        self._request('report_slave_id', callback)
