"""
Adapter defaults. Values are overridden from the settings*.cfg files (see acn.config.config)
and, for the port name and unit, from the MODBUS_PORT and MODBUS_SLAVE environment variables.
"""
import logging
import os
import sys

from acn.config.config import configure_module

logger = logging.getLogger(__name__)

# seconds between attempts to reopen a connection that dropped
reconnect_interval = 1.0

# seconds to wait for the device to answer commands that take a while to complete
reset_timeout = 5.0
clear_timeout = 10.0
pair_timeout = 10.0

# default timeout for every other request; 0 waits indefinitely
request_timeout = 0.0

port_name = '/dev/ttyUSB0'
baudrate = 115200
unit = 1

configure_module(sys.modules[__name__])

port_name = os.environ.get('MODBUS_PORT', port_name)


def unit_from_environment(value, default):
    """
    >>> unit_from_environment('17', 1)
    17
    >>> unit_from_environment(None, 1)
    1
    """
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("ignoring MODBUS_SLAVE=%r, not a number; using unit %s", value, default)
        return default


unit = unit_from_environment(os.environ.get('MODBUS_SLAVE'), unit)
