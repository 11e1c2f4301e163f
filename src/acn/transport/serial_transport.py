"""
Implements a transport over a serial port.
"""
import logging

import serial
from serial import Serial, SerialException
from serial.tools import list_ports

from acn import settings
from acn.errors import TransportError
from acn.support.events import EventSource
from acn.transport.base import Transport, TransportClosedEvent, TransportDisconnectedEvent, TransportOpenedEvent

logger = logging.getLogger(__name__)


class SerialTransport(Transport):
    """
    A transport that communicates via a serial port.

    When the port fails while reading or writing, the port is closed and TransportDisconnectedEvent fired
    to the listeners registered at that time. The listeners are dropped first, as the native port does,
    so owners re-attach their hooks, possibly while handling the event, before using the transport again.
    """

    def __init__(self, ser: Serial):
        """
        :param ser - the serial object defining the port to connect to. It should not be open.
        """
        super().__init__()
        if ser.is_open:
            raise ValueError("serial object should be initially closed")
        self.ser = ser

    @property
    def name(self):
        return self.ser.port

    @property
    def is_open(self):
        return self.ser.is_open

    def open(self):
        if self.ser.is_open:
            return
        try:
            self.ser.open()
        except (SerialException, OSError) as e:
            logger.debug("error opening serial port %s: %s", self.name, e)
            raise TransportError("unable to open %s: %s" % (self.name, e)) from e
        logger.info("opened serial port %s", self.name)
        self.events.fire(TransportOpenedEvent(self))

    def close(self):
        if not self.ser.is_open:
            return
        self.ser.close()
        logger.info("closed serial port %s", self.name)
        self.events.fire(TransportClosedEvent(self))

    def write(self, data):
        try:
            return self.ser.write(data)
        except (SerialException, OSError) as e:
            self._lost(e)

    def read(self, size=1):
        try:
            return self.ser.read(size)
        except (SerialException, OSError) as e:
            self._lost(e)

    def _lost(self, cause):
        logger.warning("serial port %s disconnected: %s", self.name, cause)
        try:
            self.ser.close()
        except (SerialException, OSError):
            logger.debug("error closing lost port %s", self.name, exc_info=True)
        listeners, self.events = self.events, EventSource()
        listeners.fire(TransportDisconnectedEvent(self))
        raise TransportError("%s disconnected: %s" % (self.name, cause)) from cause


def serial_transport(name=None, **options):
    """
    Creates a closed serial transport for the named port.
    Options are passed to `serial.Serial`; the baud rate defaults to the configured one.
    """
    options.setdefault('baudrate', settings.baudrate)
    options.setdefault('timeout', 1)
    ser = serial.Serial(**options)     # no port given, so it is not opened
    ser.port = name or settings.port_name
    return SerialTransport(ser)


def serial_port_info():
    """
    :return: a tuple of ListPortInfo for the serial ports present
    """
    return tuple(list_ports.comports())


def serial_ports():
    """
    Returns a generator for all available serial port device names.
    """
    for port in serial_port_info():
        yield port.device
