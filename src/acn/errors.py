"""
Errors reported by the ACN adapter, and the translation of master results into them.

Callers only ever see subclasses of AcnError:

- TransportError: the serial link or the master failed to deliver the request.
- DeviceException: the device answered with an in-band exception code.
- ValidationError: caller input was rejected before anything was sent.
- ProtocolLengthError: a response did not match the fixed layout of the object it carries.
- ConnectionStateError: a lifecycle operation was requested in a state that does not allow it.
"""
from enum import IntEnum


class ExceptionCode(IntEnum):
    """ In-band exception codes returned by the device. """
    ILLEGAL_FUNCTION = 0x01
    ILLEGAL_DATA_ADDRESS = 0x02
    ILLEGAL_DATA_VALUE = 0x03
    SLAVE_DEVICE_FAILURE = 0x04
    ACKNOWLEDGE = 0x05
    SLAVE_DEVICE_BUSY = 0x06
    NEGATIVE_ACKNOWLEDGE = 0x07
    MEMORY_PARITY_ERROR = 0x08
    GATEWAY_PATH_UNAVAILABLE = 0x0A
    GATEWAY_TARGET_NO_RESPONSE = 0x0B


def describe_code(code):
    """
    >>> describe_code(2)
    'ILLEGAL_DATA_ADDRESS'
    >>> describe_code(0x42)
    'unknown'
    """
    try:
        return ExceptionCode(code).name
    except ValueError:
        return 'unknown'


class AcnError(Exception):
    """ base class for all errors raised by the adapter. """


class TransportError(AcnError):
    """ The transport or master could not complete the request. """


class RequestTimeoutError(TransportError):
    """ No result arrived for a request within its timeout. """


class DeviceException(AcnError):
    """ The device reported an exception code in an otherwise well-formed response. """

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message or 'Exception %s (%s)' % (code, describe_code(code)))


class ValidationError(AcnError, ValueError):
    """ Caller input is malformed. Raised before any I/O takes place. """


class ProtocolLengthError(AcnError):
    """ A response payload has a length that violates the layout of the object it carries. """


class ConnectionStateError(AcnError):
    """ The connection is not in a state that permits the requested operation. """


def as_transport_error(error):
    """ wraps any exception that is not already an adapter error as a TransportError. """
    if isinstance(error, AcnError):
        return error
    wrapped = TransportError(str(error) or type(error).__name__)
    wrapped.__cause__ = error
    return wrapped


def translate_fault(error, response):
    """
    Determines the failure, if any, represented by a master callback.

    An exception code on the response takes precedence over a transport error
    reported alongside it, which is discarded.

    :param error: the error reported by the master, or None
    :param response: the response reported by the master, or None
    :return: the AcnError to reject the request with, or None when the request succeeded.
    """
    code = getattr(response, 'exception_code', None) if response is not None else None
    if code is not None:
        return DeviceException(code)
    if error is not None:
        return as_transport_error(error)
    return None
