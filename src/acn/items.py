"""
Descriptors for generic device items: holding registers or objects that are read and written as a unit.

An item knows where it lives on the device, how to convert between the device bytes and a python value,
and how to render that value for people (format) and parse it back (unformat).
"""
import struct
from abc import abstractmethod
from enum import Enum

from acn.codecs import Codec
from acn.errors import ProtocolLengthError, ValidationError

REGISTER_SIZE = 2


class ItemKind(Enum):
    REGISTER = 'register'
    OBJECT = 'object'


class RegisterItem(Codec):
    """
    :param address: the register address, or the object id for object items
    :param length: the number of 16-bit registers occupied by the item
    :param kind: whether the item is read with an object read or a holding register read
    :param title: a human readable name
    :param units: units appended when formatting
    """

    def __init__(self, address, length=1, kind=ItemKind.REGISTER, title=None, units=''):
        if not isinstance(address, int) or address < 0:
            raise ValidationError("invalid item address %r" % (address,))
        self.address = address
        self.length = length
        self.kind = ItemKind(kind)
        self.title = title or ('Item %d' % address)
        self.units = units

    @property
    def byte_length(self):
        return self.length * REGISTER_SIZE

    def decode(self, data):
        return self.from_buffer(data)

    def encode(self, value) -> bytes:
        return self.to_buffer(value)

    @abstractmethod
    def from_buffer(self, data):
        """ converts the bytes read from the device into a value """
        raise NotImplementedError

    @abstractmethod
    def to_buffer(self, value) -> bytes:
        """ converts a value into the bytes written to the device """
        raise NotImplementedError

    def format(self, value):
        text = str(value)
        return text + ' ' + self.units if self.units else text

    def unformat(self, text):
        """ parses a human entered value. Values that are not strings are returned unchanged """
        return text

    def _check_length(self, data, minimum):
        if len(data) < minimum:
            raise ProtocolLengthError("%s: expected %d bytes, received %d" % (self.title, minimum, len(data)))

    def __repr__(self):
        return '%s(%s @ %d)' % (type(self).__name__, self.title, self.address)


def parse_int(text):
    """
    Parses decimal, or hex when prefixed with 0x.

    >>> parse_int('0x1F')
    31
    >>> parse_int('12')
    12
    """
    try:
        return int(text, 0) if text.lower().startswith('0x') else int(text, 10)
    except ValueError as e:
        raise ValidationError("not a number: '%s'" % text) from e


class IntegerItem(RegisterItem):
    """ an unsigned big-endian integer occupying the item's registers. """
    struct_format = None
    maximum = None

    def from_buffer(self, data):
        self._check_length(data, struct.calcsize(self.struct_format))
        return struct.unpack_from(self.struct_format, data)[0]

    def to_buffer(self, value):
        if not isinstance(value, int) or not 0 <= value <= self.maximum:
            raise ValidationError("%s: value out of range: %r" % (self.title, value))
        return struct.pack(self.struct_format, value)

    def unformat(self, text):
        return parse_int(text) if isinstance(text, str) else text


class UInt16Item(IntegerItem):
    struct_format = '>H'
    maximum = 0xFFFF

    def __init__(self, address, **kwargs):
        super().__init__(address, length=1, **kwargs)


class UInt32Item(IntegerItem):
    struct_format = '>I'
    maximum = 0xFFFFFFFF

    def __init__(self, address, **kwargs):
        super().__init__(address, length=2, **kwargs)


class StringItem(RegisterItem):
    """ An ASCII string padded with NUL to the item length. """

    def from_buffer(self, data):
        return bytes(data[:self.byte_length]).split(b'\0', 1)[0].decode('ascii', errors='replace')

    def to_buffer(self, value):
        try:
            encoded = value.encode('ascii')
        except (AttributeError, UnicodeEncodeError) as e:
            raise ValidationError("%s: not an ASCII string: %r" % (self.title, value)) from e
        if len(encoded) > self.byte_length:
            raise ValidationError("%s: string longer than %d characters" % (self.title, self.byte_length))
        return encoded.ljust(self.byte_length, b'\0')


class BytesItem(RegisterItem):
    """ Raw bytes, formatted as space separated hex. """

    def from_buffer(self, data):
        return bytes(data)

    def to_buffer(self, value):
        value = bytes(value)
        if len(value) != self.byte_length:
            raise ValidationError("%s: expected %d bytes, got %d" % (self.title, self.byte_length, len(value)))
        return value

    def format(self, value):
        return ' '.join('%02x' % b for b in value)

    def unformat(self, text):
        if not isinstance(text, str):
            return text
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise ValidationError("%s: invalid hex '%s'" % (self.title, text)) from e
