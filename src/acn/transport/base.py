from abc import abstractmethod

from acn.support.events import EventSource


class TransportEvent:
    """ base class for transport events. """
    def __init__(self, transport):
        self.transport = transport


class TransportOpenedEvent(TransportEvent):
    """ The transport was opened. """


class TransportClosedEvent(TransportEvent):
    """ The transport was closed on request. """


class TransportDisconnectedEvent(TransportEvent):
    """ The transport lost the underlying device. """


class Transport:
    """
    The byte level link to the device. The master reads and writes through it;
    the connection opens and closes it.
    """

    def __init__(self):
        self.events = EventSource()

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def open(self):
        """
        Opens the link. Raises TransportError if the device cannot be opened.
        Opening an open transport returns silently.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """ Closes the link. Closing a closed transport returns silently. """
        raise NotImplementedError

    @abstractmethod
    def write(self, data) -> int:
        raise NotImplementedError

    @abstractmethod
    def read(self, size=1) -> bytes:
        raise NotImplementedError
