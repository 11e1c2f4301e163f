from types import MappingProxyType

from acn.errors import ValidationError

# command ids are the position in this list; id 0 is reserved
COMMAND_NAMES = (
    '',
    'reset',
    'save',
    'restore',
    'pair',
    'clear',
    'sendconn',
    'sendshort',
    'sendlong',
    'broadcast',
    'scan',
    'ping',
)

UNLOCK_COMMAND_ID = 255


class CommandTable:
    """
    Maps command names to the numeric ids understood by the device.

    The table is fixed at construction. The reserved name at index 0 is not a command.

    >>> CommandTable(COMMAND_NAMES).id_of('scan')
    10
    >>> 'bogus' in CommandTable(COMMAND_NAMES)
    False
    """

    def __init__(self, names):
        self._names = tuple(names)
        self._ids = MappingProxyType({name: i for i, name in enumerate(self._names) if i and name})

    @property
    def names(self):
        return tuple(self._ids.keys())

    def id_of(self, name):
        try:
            return self._ids[name]
        except (KeyError, TypeError):
            raise ValidationError("Unknown command '%s'" % (name,)) from None

    def name_of(self, command_id):
        name = self._names[command_id] if 0 < command_id < len(self._names) else None
        if not name:
            raise ValidationError("Unknown command id %r" % (command_id,))
        return name

    def __contains__(self, name):
        return name in self._ids

    def __iter__(self):
        return iter(self._ids)

    def __len__(self):
        return len(self._ids)


DEFAULT_COMMANDS = CommandTable(COMMAND_NAMES)
