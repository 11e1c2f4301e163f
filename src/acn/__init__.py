"""
Adaptive Control Network (ACN) device adapter.

- Transport: the serial link to the coordinator. SerialTransport owns the serial port.
- Master: the Modbus-style request/response layer over the transport. It is supplied by the
  application; this package only defines the interface it must offer.
- AcnConnection: keeps the logical connection open. If the link drops, the master is rewired to the
  transport and the transport is reopened on a fixed interval until it comes back.
- Dispatcher: sends one request to the master and resolves a future with the response or the
  translated error. In-band exception codes win over transport errors.
- Codecs: the binary layouts of the device objects (factory record, connection table, ping and
  scan results, slave id) and generic register items.
- AcnPort: the device operations, built from the pieces above.

Typical use::

    port = AcnPort(serial_transport('/dev/ttyUSB0'), master)
    port.open()
    config = port.get_factory_config().result(timeout=5)
"""
from acn.codecs import ConnectionEntry, ConnectionStatus, FactoryConfig, LinkQuality, NO_RESPONSE, PingResult, \
    ScanResult, ScanType, SlaveId
from acn.connection import AcnConnection, ConnectedEvent, ConnectionState, DisconnectedEvent, \
    ReconnectAttemptEvent, ReconnectFailedEvent
from acn.errors import AcnError, ConnectionStateError, DeviceException, ProtocolLengthError, RequestTimeoutError, \
    TransportError, ValidationError
from acn.items import BytesItem, ItemKind, RegisterItem, StringItem, UInt16Item, UInt32Item
from acn.port import AcnPort, Objects
