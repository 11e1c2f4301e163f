"""
Keeps the logical connection to an ACN device alive across physical disconnects.

States:

    CLOSED -> OPENING -> OPEN -> DISCONNECTED -> OPENING (retry) -> OPEN ...

An explicit open() that fails is reported to the caller and not retried. Once a connection
that was open drops unexpectedly, as reported by either the transport or the master, the
listeners are rewired and a reconnect loop tries to reopen the transport every
`reconnect_interval` seconds until it succeeds.
Failed attempts are logged and announced as events, never raised. DESTROYED is terminal.
"""
import logging
import threading
from enum import Enum

from acn import settings
from acn.errors import ConnectionStateError, TransportError
from acn.protocol.master import Master, MasterDisconnectedEvent
from acn.support.events import EventSource
from acn.support.loop import AsyncLoop
from acn.support.retry_strategy import PeriodRetryStrategy
from acn.transport.base import Transport, TransportDisconnectedEvent

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    CLOSED = 'closed'
    OPENING = 'opening'
    OPEN = 'open'
    DISCONNECTED = 'disconnected'
    DESTROYED = 'destroyed'


class ConnectionEvent:
    """ base class for connection events. """
    def __init__(self, connection):
        self.connection = connection


class ConnectedEvent(ConnectionEvent):
    """ The connection was opened, either explicitly or by reconnecting. """


class DisconnectedEvent(ConnectionEvent):
    """ An open connection dropped unexpectedly. """


class ReconnectAttemptEvent(ConnectionEvent):
    """ The reconnect loop is about to try reopening the connection. """
    def __init__(self, connection, attempt):
        super().__init__(connection)
        self.attempt = attempt


class ReconnectFailedEvent(ConnectionEvent):
    """ A reconnect attempt failed. Another will follow after the retry interval. """
    def __init__(self, connection, attempt, error):
        super().__init__(connection)
        self.attempt = attempt
        self.error = error


class ReconnectLoop(AsyncLoop):
    """
    Waits for the retry period and then attempts to reconnect, until the connection reports success
    or the loop is stopped.
    """

    def __init__(self, connection: 'AcnConnection', retry_strategy):
        super().__init__(name='acn-reconnect %s' % connection.transport.name)
        self.connection = connection
        self.retry_strategy = retry_strategy

    def loop(self):
        if self.stop_event.wait(self.retry_strategy()):
            return
        self.connection._reconnect(self, self.retry_strategy.attempts)


class AcnConnection:
    """
    The logical connection to a device, made of a transport and the master that talks over it.

    Fires ConnectedEvent, DisconnectedEvent, ReconnectAttemptEvent and ReconnectFailedEvent
    through `events`.

    :param transport: the transport to the device, exclusively owned by this connection
    :param master: the master using the transport
    :param reconnect_interval: seconds between reconnect attempts
    """

    def __init__(self, transport: Transport, master: Master, reconnect_interval=None, log=logger):
        self.transport = transport
        self.master = master
        self.reconnect_interval = settings.reconnect_interval if reconnect_interval is None else reconnect_interval
        self.events = EventSource()
        self.logger = log
        self._state = ConnectionState.CLOSED
        self._reconnect_loop = None
        self._lock = threading.RLock()         # guards state and the reconnect loop
        self._open_lock = threading.Lock()     # one physical open attempt at a time
        master.events.add(self._master_events)
        transport.events.add(self._transport_events)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self):
        return self._state is ConnectionState.OPEN

    @property
    def reconnecting(self):
        return self._reconnect_loop is not None

    def open(self):
        """
        Opens the transport.
        Raises TransportError when the transport cannot be opened; the first open is not retried.
        """
        with self._lock:
            if self._state is ConnectionState.OPEN:
                return
            self._check_can_open()
        self._try_open()

    def _check_can_open(self):
        state = self._state
        if state is ConnectionState.DESTROYED:
            raise ConnectionStateError("connection to %s has been destroyed" % self.transport.name)
        if state is ConnectionState.OPENING:
            raise ConnectionStateError("connection to %s is already opening" % self.transport.name)

    def _try_open(self, reconnect_loop=None):
        """
        Makes one attempt to open the transport.
        :param reconnect_loop: the loop making the attempt, or None for an explicit open
        :return: True if the connection was opened by this call
        """
        with self._open_lock:
            with self._lock:
                if self._state in (ConnectionState.OPEN, ConnectionState.DESTROYED):
                    return False
                if reconnect_loop is not None and reconnect_loop is not self._reconnect_loop:
                    return False   # the loop was cancelled while waiting
                self._state = ConnectionState.OPENING
            try:
                self.transport.open()
            except Exception:
                with self._lock:
                    if self._state is ConnectionState.OPENING:
                        self._state = ConnectionState.DISCONNECTED if self._reconnect_loop else ConnectionState.CLOSED
                raise
            with self._lock:
                if self._state is not ConnectionState.OPENING:
                    # destroyed while opening
                    self.transport.close()
                    return False
                self._state = ConnectionState.OPEN
                loop, self._reconnect_loop = self._reconnect_loop, None
        if loop is not None:
            loop.stop()
        self.logger.info("connected to %s", self.transport.name)
        self.events.fire(ConnectedEvent(self))
        return True

    def _master_events(self, event):
        if isinstance(event, MasterDisconnectedEvent):
            self._disconnected()

    def _transport_events(self, event):
        if isinstance(event, TransportDisconnectedEvent):
            self._disconnected()

    def _disconnected(self):
        """ handles an unexpected loss of the connection """
        with self._lock:
            if self._state is not ConnectionState.OPEN:
                self.logger.debug("ignoring disconnect of %s while %s", self.transport.name, self._state.value)
                return
            self._state = ConnectionState.DISCONNECTED
        self.logger.info("disconnected from %s", self.transport.name)
        self.events.fire(DisconnectedEvent(self))
        self._rewire()
        self._schedule_reconnect()

    def _rewire(self):
        """
        The transport drops its listeners when disconnecting,
        so this connection and the master hook up again.
        """
        self.transport.events.add(self._transport_events)
        self.master.attach_transport(self.transport)
        self.master.set_up_connection()

    def _schedule_reconnect(self):
        with self._lock:
            if self._reconnect_loop is not None or self._state is not ConnectionState.DISCONNECTED:
                return
            loop = self._reconnect_loop = ReconnectLoop(self, PeriodRetryStrategy(self.reconnect_interval))
        loop.start()

    def _reconnect(self, loop, attempt):
        """ called by the reconnect loop for each attempt. Failures are logged, not raised. """
        self.events.fire(ReconnectAttemptEvent(self, attempt))
        try:
            self._try_open(loop)
        except TransportError as e:
            self.logger.debug("reconnect attempt %d to %s failed: %s", attempt, self.transport.name, e)
            self.events.fire(ReconnectFailedEvent(self, attempt, e))

    def _cancel_reconnect(self):
        with self._lock:
            loop, self._reconnect_loop = self._reconnect_loop, None
        if loop is not None:
            loop.stop()

    def close(self):
        """ Stops any reconnection and closes the transport. """
        with self._lock:
            if self._state is ConnectionState.DESTROYED:
                return
        self._cancel_reconnect()
        with self._open_lock:
            with self._lock:
                self._state = ConnectionState.CLOSED
            self.transport.close()

    def destroy(self):
        """ Tears down the master and the transport. Calling destroy() again has no effect. """
        with self._lock:
            if self._state is ConnectionState.DESTROYED:
                return
            self._state = ConnectionState.DESTROYED
        self._cancel_reconnect()
        self.master.events.remove(self._master_events)
        self.transport.events.remove(self._transport_events)
        self.master.destroy()
        self.logger.info("connection to %s destroyed", self.transport.name)
