"""
The interface of the Modbus-style master that frames requests to the device.

The master owns framing, checksums, byte level retries and unit addressing. It serializes requests
itself, so at most one is outstanding on the wire. Each request takes a callback that is invoked
as callback(error, response) when the request completes; response may carry an in-band exception_code.
"""
from abc import abstractmethod

from acn.support.events import EventSource


class MasterEvent:
    def __init__(self, master):
        self.master = master


class MasterDisconnectedEvent(MasterEvent):
    """ The master lost its connection to the device unexpectedly. """


class MasterResponse:
    """
    :param values: the payload bytes of the response
    :param exception_code: the in-band exception code, or None when the device accepted the request
    :param status: the status byte reported by write requests
    """
    def __init__(self, values=b'', exception_code=None, status=None):
        self.values = bytes(values)
        self.exception_code = exception_code
        self.status = status

    def __repr__(self):
        return 'MasterResponse(values=%r, exception_code=%r, status=%r)' % \
            (self.values, self.exception_code, self.status)


class SlaveIdResponse(MasterResponse):
    """ The response to report slave id: the product code, run state and firmware version. """
    def __init__(self, product, run, version, values=b'', exception_code=None):
        super().__init__(values, exception_code)
        self.product = product
        self.run = run
        self.version = version


class Master:

    def __init__(self):
        self.events = EventSource()

    @abstractmethod
    def attach_transport(self, transport):
        """
        Registers the master's hooks on the transport. Called again after a disconnect,
        since the transport may drop its listeners when disconnecting.
        """
        raise NotImplementedError

    @abstractmethod
    def set_up_connection(self):
        """ (re)establishes the master's internal wiring to the attached transport. """
        raise NotImplementedError

    @abstractmethod
    def destroy(self):
        """ releases the master and its transport """
        raise NotImplementedError

    @abstractmethod
    def read_object(self, object_id, callback):
        raise NotImplementedError

    @abstractmethod
    def write_object(self, object_id, data, callback):
        raise NotImplementedError

    @abstractmethod
    def read_holding_registers(self, address, length, callback):
        raise NotImplementedError

    @abstractmethod
    def write_multiple_registers(self, address, data, callback):
        raise NotImplementedError

    @abstractmethod
    def command(self, command_id, data, callback):
        raise NotImplementedError

    @abstractmethod
    def report_slave_id(self, callback):
        raise NotImplementedError

    def fire_disconnected(self):
        self.events.fire(MasterDisconnectedEvent(self))
