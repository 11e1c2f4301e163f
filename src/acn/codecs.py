"""
Encoders and decoders for the binary objects held by an ACN device.

Decoders take the raw payload of a response and return a fresh value object.
Encoders validate their input and return a fresh buffer. Neither performs I/O.
"""
import struct
from abc import abstractmethod
from enum import IntEnum

from acn.errors import ProtocolLengthError, ValidationError
from acn.support.mixins import ValueObject

MAC_LENGTH = 8
FACTORY_RECORD_LENGTH = 20
FACTORY_RESERVED_LENGTH = 7
CONNECTION_ENTRY_LENGTH = 14
PING_MIN_LENGTH = 7
SERIAL_DIGITS = 10
MAX_UINT32 = 0xFFFFFFFF
MAX_UINT16 = 0xFFFF


def zero_pad(number, length):
    """
    Pads a number on the left with zeros. Longer values are truncated on the left.

    >>> zero_pad(42, 5)
    '00042'
    >>> zero_pad('a', 2)
    '0a'
    """
    return ('0' * length + str(number))[-length:]


def mac_to_string(buf, offset=0, length=MAC_LENGTH):
    """
    Formats bytes as colon separated hex octets.

    >>> mac_to_string(bytes([0, 0x11, 0xab]), 0, 3)
    '00:11:ab'
    """
    return ':'.join(zero_pad('%x' % b, 2) for b in buf[offset:offset + length])


def string_to_mac(text):
    """
    Parses a string like 00:11:22:33:44:55:66:77 into 8 bytes.

    >>> string_to_mac('00:11:22:33:44:55:66:ff')
    b'\\x00\\x11"3DUf\\xff'
    """
    parts = text.split(':')
    if len(parts) != MAC_LENGTH:
        raise ValidationError("MAC address must have %d octets: '%s'" % (MAC_LENGTH, text))
    try:
        return bytes(int(p, 16) for p in parts)
    except ValueError as e:
        raise ValidationError("invalid MAC address '%s'" % text) from e


def short_address_to_string(buf, offset=0):
    """
    Formats a little-endian 16-bit address as 4 hex digits.

    >>> short_address_to_string(bytes([0xb2, 0xa1]))
    'a1b2'
    """
    return zero_pad('%x' % struct.unpack_from('<H', buf, offset)[0], 4)


def pack_words(values):
    """
    Packs integers as big-endian 16-bit words.

    >>> pack_words([1, 0x1234])
    b'\\x00\\x01\\x124'
    """
    for v in values:
        if not isinstance(v, int) or not 0 <= v <= MAX_UINT16:
            raise ValidationError("register value out of range: %r" % (v,))
    return struct.pack('>%dH' % len(values), *values)


def check_length(data, expected, what):
    if len(data) != expected:
        raise ProtocolLengthError('Wrong response length for %s object (%d)' % (what, len(data)))


class Decoder:
    @abstractmethod
    def decode(self, data):
        """
        decodes the payload of a response.
        :param data: a buffer of binary data to decode
        :returns a value representing the decoded data
        """
        raise NotImplementedError


class Encoder:
    @abstractmethod
    def encode(self, value) -> bytes:
        """ encodes a value as a data buffer """
        raise NotImplementedError


class Codec(Decoder, Encoder):
    """
    Knows how to convert object state to/from the on-wire data format.
    """


class FactoryConfig(ValueObject):
    """ The factory record: the device's long address, serial number and product type. """
    fields = (('mac_address', 'macAddress'), ('serial_number', 'serialNumber'), ('product_type', 'productType'))

    def __init__(self, mac_address, serial_number, product_type):
        super().__init__(mac_address=mac_address, serial_number=serial_number, product_type=product_type)


class FactoryConfigCodec(Codec):
    """
    Layout (20 bytes): 8 byte MAC, 32-bit big-endian serial number, product type byte, 7 reserved bytes.

    A device that has never been programmed returns the single byte 0, which decodes to None.
    """

    def decode(self, data):
        if len(data) == 1 and data[0] == 0:
            return None
        check_length(data, FACTORY_RECORD_LENGTH, 'Factory')
        serial_number, product_type = struct.unpack_from('>IB', data, MAC_LENGTH)
        return FactoryConfig(mac_to_string(data, 0, MAC_LENGTH), serial_number, product_type)

    def encode(self, value: FactoryConfig) -> bytes:
        mac = value.mac_address
        if isinstance(mac, str):
            mac = string_to_mac(mac)
        if not isinstance(mac, (bytes, bytearray)) or len(mac) != MAC_LENGTH:
            raise ValidationError('Invalid data for factory config: MAC address must be %d bytes' % MAC_LENGTH)
        serial_number = value.serial_number
        if not isinstance(serial_number, int) or not 0 <= serial_number <= MAX_UINT32:
            raise ValidationError('Invalid data for factory config: serial number %r' % (serial_number,))
        product_type = value.product_type
        if not isinstance(product_type, int) or not 0 <= product_type <= 0xFF:
            raise ValidationError('Invalid data for factory config: product type %r' % (product_type,))
        return bytes(mac) + struct.pack('>IB', serial_number, product_type) + bytes(FACTORY_RESERVED_LENGTH)


class ConnectionStatus(ValueObject):
    """ The status bitfield of a connection table entry. """
    fields = (('rx_on_when_idle', 'rxOnWhenIdle'), ('direct_connection', 'directConnection'),
              ('long_address_valid', 'longAddressValid'), ('short_address_valid', 'shortAddressValid'),
              ('finish_join', 'finishJoin'), ('is_family', 'isFamily'), ('is_valid', 'isValid'))

    bits = {
        'rx_on_when_idle': 0x01,
        'direct_connection': 0x02,
        'long_address_valid': 0x04,
        'short_address_valid': 0x08,
        'finish_join': 0x10,
        'is_family': 0x20,
        'is_valid': 0x80,
    }

    @classmethod
    def from_byte(cls, status):
        """
        >>> ConnectionStatus.from_byte(0x81).rx_on_when_idle
        True
        """
        return cls(**{name: (status & mask) > 0 for name, mask in cls.bits.items()})

    def to_byte(self):
        """
        >>> ConnectionStatus.from_byte(0x8B).to_byte() == 0x8B
        True
        """
        result = 0
        for name, mask in self.bits.items():
            if getattr(self, name):
                result |= mask
        return result


class ConnectionEntry(ValueObject):
    """ An entry in the device's connection table. """
    fields = (('pan_id', 'panId'), ('alt_address', 'altAddress'), ('address', 'address'),
              ('status', 'status'), ('extra', 'extra'))

    def __init__(self, pan_id, alt_address, address, status: ConnectionStatus, extra):
        super().__init__(pan_id=pan_id, alt_address=alt_address, address=address, status=status, extra=extra)


class ConnectionTableCodec(Decoder):
    """
    The connection table is a sequence of 14 byte entries:
    pan id (LE16), alternate address (LE16), 8 byte long address, status byte, 1 unused byte.
    Only entries marked valid in their status are returned.
    """

    def decode(self, data):
        if len(data) % CONNECTION_ENTRY_LENGTH:
            raise ProtocolLengthError('Wrong response length for Connections object (%d)' % len(data))
        connections = []
        for offset in range(0, len(data), CONNECTION_ENTRY_LENGTH):
            status_byte = data[offset + 12]
            status = ConnectionStatus.from_byte(status_byte)
            if status.is_valid:
                connections.append(ConnectionEntry(
                    pan_id=short_address_to_string(data, offset),
                    alt_address=short_address_to_string(data, offset + 2),
                    address=mac_to_string(data, offset + 4, MAC_LENGTH),
                    status=status,
                    extra=status_byte))
        return connections


class LinkQuality(ValueObject):
    """ Link quality indicator and received signal strength for one direction of a link. """
    fields = (('lqi', 'lqi'), ('rssi', 'rssi'))

    def __init__(self, lqi, rssi):
        super().__init__(lqi=lqi, rssi=rssi)


class PingResult(ValueObject):
    """
    The round trip time and link quality in each direction of a ping.
    When the peer did not answer, only `error` is set.
    """
    fields = (('round_trip_time', 'rtt'), ('forward', 'fwd'), ('reverse', 'rev'), ('error', 'error'))

    def __init__(self, round_trip_time=None, forward=None, reverse=None, error=None):
        super().__init__(round_trip_time=round_trip_time, forward=forward, reverse=reverse, error=error)

    @property
    def responded(self):
        return self.error is None

    def as_dict(self):
        if not self.responded:
            return {'error': self.error}
        result = super().as_dict()
        del result['error']
        return result


NO_RESPONSE = PingResult(error='No Response')


def encode_ping_address(address):
    """
    >>> encode_ping_address(0x1234)
    b'\\x124'
    """
    if not isinstance(address, int) or not 0 <= address <= MAX_UINT16:
        raise ValidationError('ping address must be a 16-bit value: %r' % (address,))
    return struct.pack('>H', address)


class PingResultCodec(Decoder):
    """ result byte, round trip time (BE16), forward lqi, forward rssi, reverse lqi, reverse rssi """

    def decode(self, data):
        if len(data) < PING_MIN_LENGTH:
            return NO_RESPONSE
        _, rtt, fwd_lqi, fwd_rssi, rev_lqi, rev_rssi = struct.unpack_from('>BHBBBB', data)
        return PingResult(rtt, LinkQuality(fwd_lqi, fwd_rssi), LinkQuality(rev_lqi, rev_rssi))


class ScanType(IntEnum):
    ENERGY = 1
    ACTIVE = 2
    BOTH = 3


class ScanResult(ValueObject):
    """ The channel the device considers best, followed by the relative noise level of each channel. """
    fields = (('best_channel', 'bestChannel'), ('noise', 'noise'))

    def __init__(self, best_channel, noise):
        super().__init__(best_channel=best_channel, noise=bytes(noise))


def encode_scan_request(scan_type, duration):
    """
    >>> encode_scan_request(ScanType.BOTH, 4)
    b'\\x03\\x04'
    """
    try:
        scan_type = ScanType(scan_type)
    except ValueError as e:
        raise ValidationError('unknown scan type: %r' % (scan_type,)) from e
    if not isinstance(duration, int) or not 0 <= duration <= 0xFF:
        raise ValidationError('scan duration must fit in a byte: %r' % (duration,))
    return bytes([scan_type, duration])


class ScanResultCodec(Decoder):

    def decode(self, data):
        if not len(data):
            raise ProtocolLengthError('Wrong response length for Scan result (0)')
        return ScanResult(data[0], data[1:])


class SlaveId(ValueObject):
    fields = (('product', 'product'), ('product_type', 'productType'), ('run', 'run'), ('version', 'version'),
              ('serial_number', 'serialNumber'), ('fault', 'fault'))

    def __init__(self, product, product_type, run, version, serial_number, fault):
        super().__init__(product=product, product_type=product_type, run=run, version=version,
                         serial_number=serial_number, fault=fault)


products = {
    1: 'Gw/Repeater',
    2: 'Fob',
}


def product_to_string(code):
    """
    >>> product_to_string(2)
    'Fob'
    >>> product_to_string(9)
    'Unknown'
    """
    return products.get(code, 'Unknown')


def fault_to_string(run):
    """
    >>> fault_to_string(0)
    'Unprogrammed'
    """
    return 'Unprogrammed' if run == 0 else 'None'


class SlaveIdCodec(Decoder):
    """ decodes a report slave id response. The serial number is the first 4 bytes of the values, big-endian. """

    def decode(self, response):
        values = response.values
        if len(values) < 4:
            raise ProtocolLengthError('Wrong response length for Slave ID (%d)' % len(values))
        serial = struct.unpack_from('>I', values)[0]
        return SlaveId(product=response.product,
                       product_type=product_to_string(response.product),
                       run=response.run,
                       version=response.version,
                       serial_number=zero_pad(serial, SERIAL_DIGITS),
                       fault=fault_to_string(response.run))
