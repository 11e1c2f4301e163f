"""
The operations offered by an ACN device.

Each operation builds a request, dispatches it to the master and decodes the response.
Operations return a FutureValue holding the decoded result, or the AcnError that prevented it.
Invalid arguments raise ValidationError immediately, before anything is sent.
"""
import logging

from acn import settings
from acn.codecs import ConnectionTableCodec, FactoryConfig, FactoryConfigCodec, PingResultCodec, ScanResultCodec, \
    SlaveIdCodec, encode_ping_address, encode_scan_request, pack_words
from acn.commands import DEFAULT_COMMANDS, UNLOCK_COMMAND_ID, CommandTable
from acn.connection import AcnConnection
from acn.errors import DeviceException, ProtocolLengthError, ValidationError
from acn.items import ItemKind, RegisterItem
from acn.protocol.dispatch import Dispatcher, Request, RequestKind
from acn.protocol.futures import FutureValue
from acn.protocol.master import Master
from acn.transport.base import Transport

logger = logging.getLogger(__name__)


class Objects:
    """ ids of the objects held by the device """
    FACTORY = 0
    USER = 1
    NET_STATUS = 2
    SCAN_RESULT = 3
    CONNECTION_TABLE = 4
    COORD_STATUS = 5
    SENSOR_DATA = 7


def status_byte(response):
    """ the first byte of a command response, which reports the command's outcome """
    if not response.values:
        raise ProtocolLengthError('Empty response to command')
    return response.values[0]


class AcnPort:
    """
    Communicates with an ACN device over a transport and master.

    :param transport: the link to the device
    :param master: the master that frames requests over the transport
    :param dispatcher: sends requests to the master. A dispatcher using the configured request timeout
        is created when not given.
    :param commands: the names of the commands understood by the device
    """

    def __init__(self, transport: Transport, master: Master, dispatcher: Dispatcher=None,
                 commands: CommandTable=DEFAULT_COMMANDS, reconnect_interval=None):
        self.connection = AcnConnection(transport, master, reconnect_interval)
        self.events = self.connection.events
        self.dispatcher = dispatcher or Dispatcher(master, settings.request_timeout or None)
        self.commands = commands
        self.factory_codec = FactoryConfigCodec()
        self.connection_table_codec = ConnectionTableCodec()
        self.ping_codec = PingResultCodec()
        self.scan_codec = ScanResultCodec()
        self.slave_id_codec = SlaveIdCodec()

    @property
    def name(self):
        return self.connection.transport.name

    def open(self):
        self.connection.open()

    def close(self):
        self.connection.close()

    def destroy(self):
        self.connection.destroy()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.destroy()

    def _dispatch(self, kind, target=None, payload=b'', length=None, timeout=None) -> FutureValue:
        request = Request(kind, target, payload, length, timeout)
        logger.debug("dispatching %r", request)
        return self.dispatcher.dispatch(request)

    def _command(self, command_id, data=b'', timeout=None):
        return self._dispatch(RequestKind.COMMAND, command_id, data, timeout=timeout)

    def get_slave_id(self) -> FutureValue:
        """ the product, run state, version and serial number reported by the device. """
        return self._dispatch(RequestKind.REPORT_SLAVE_ID).then(self.slave_id_codec.decode)

    def get_factory_config(self) -> FutureValue:
        """
        Reads the factory configuration from non-volatile memory.
        The result is a FactoryConfig, or None when the device has not been programmed.
        """
        return self._dispatch(RequestKind.READ_OBJECT, Objects.FACTORY) \
            .then(lambda response: self.factory_codec.decode(response.values))

    def set_factory_config(self, config: FactoryConfig) -> FutureValue:
        """ Writes the factory configuration into the device's non-volatile memory. """
        payload = self.factory_codec.encode(config)

        def check_status(response):
            if response.status:
                raise DeviceException(response.status, 'Failed to write factory config')
            return None

        return self._dispatch(RequestKind.WRITE_OBJECT, Objects.FACTORY, payload).then(check_status)

    def get_connections(self) -> FutureValue:
        """ the valid entries of the device's connection table, in table order. """
        return self._dispatch(RequestKind.READ_OBJECT, Objects.CONNECTION_TABLE) \
            .then(lambda response: self.connection_table_codec.decode(response.values))

    def get_coordinator_status(self) -> FutureValue:
        """ the raw coordinator status object. """
        return self._dispatch(RequestKind.READ_OBJECT, Objects.COORD_STATUS) \
            .then(lambda response: response.values)

    def command(self, name, data=b'') -> FutureValue:
        """
        Sends a named command with an arbitrary payload.
        :return: a future holding the raw response
        """
        return self._command(self.commands.id_of(name), bytes(data))

    def unlock(self) -> FutureValue:
        return self._command(UNLOCK_COMMAND_ID)

    def scan(self, scan_type, duration) -> FutureValue:
        """
        Scans the radio channels.
        :param scan_type: a ScanType: energy, active or both
        :param duration: the enumerated time to dwell on each channel
        :return: a future holding the ScanResult
        """
        payload = encode_scan_request(scan_type, duration)
        return self._command(self.commands.id_of('scan'), payload).then(lambda r: self.scan_codec.decode(r.values))

    def reset(self) -> FutureValue:
        return self._command(self.commands.id_of('reset'), timeout=settings.reset_timeout).then(status_byte)

    def clear(self) -> FutureValue:
        """ clears the network configuration """
        return self._command(self.commands.id_of('clear'), timeout=settings.clear_timeout).then(status_byte)

    def pair(self) -> FutureValue:
        return self._command(self.commands.id_of('pair'), timeout=settings.pair_timeout).then(status_byte)

    def ping(self, address) -> FutureValue:
        """
        Asks the device to ping another node, to verify wireless communication.
        :param address: the 16-bit short address of the node
        :return: a future holding the PingResult, which is NO_RESPONSE when the node did not answer
        """
        payload = encode_ping_address(address)
        return self._command(self.commands.id_of('ping'), payload).then(lambda r: self.ping_codec.decode(r.values))

    def set_registers(self, address, values) -> FutureValue:
        """ writes 16-bit values to consecutive holding registers """
        return self._dispatch(RequestKind.WRITE_HOLDING_REGISTERS, address, pack_words(values))

    def read(self, item: RegisterItem) -> FutureValue:
        """ reads an item with an object read or a holding register read, as the item declares. """
        if item.kind is ItemKind.OBJECT:
            future = self._dispatch(RequestKind.READ_OBJECT, item.address)
        else:
            future = self._dispatch(RequestKind.READ_HOLDING_REGISTERS, item.address, length=item.length)
        return future.then(lambda response: item.from_buffer(response.values))

    def write(self, item: RegisterItem, value) -> FutureValue:
        """
        writes a value to an item. Text values are parsed with the item's unformat().
        :return: a future holding True once the device has accepted the value
        """
        if item is None:
            raise ValidationError('no item to write')
        data = item.to_buffer(item.unformat(value))
        kind = RequestKind.WRITE_OBJECT if item.kind is ItemKind.OBJECT else RequestKind.WRITE_HOLDING_REGISTERS
        return self._dispatch(kind, item.address, data).then(lambda response: True)
