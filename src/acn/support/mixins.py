def quote(val):
    return "'" + str(val) + "'" if val is not None else "None"


def render(value):
    """
    Converts a value into plain python data, expanding nested value objects.

    >>> render([1, (2, 3)])
    [1, [2, 3]]
    >>> render(b'\\x01\\x02')
    [1, 2]
    """
    if isinstance(value, ValueObject):
        return value.as_dict()
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, (list, tuple)):
        return [render(v) for v in value]
    return value


class StringerMixin:

    def __str__(self):
        """
        outputs the class name and the object fields in declaration order
        """
        return type(self).__name__ + ':' + self._items_string()

    def _items_string(self):
        return "{" + ", ".join([("'" + str(key)) + "'" + ": " + (quote(val))
                                for key, val in self._fields()]) + "}"

    def _fields(self):
        return self.__dict__.items()


class CommonEqualityMixin(object):
    """  a field-wise equals comparison for value objects. """

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(str(self))


class ValueObject(CommonEqualityMixin, StringerMixin):
    """
    An immutable record decoded from the device.

    Subclasses list their attributes in `fields` as (attribute, key) pairs, where
    key is the name used when rendering to a dictionary. Attributes are assigned once,
    from the constructor, and cannot be rebound afterwards.
    """
    fields = ()

    def __init__(self, **values):
        for attribute, _ in self.fields:
            object.__setattr__(self, attribute, values.get(attribute))

    def __setattr__(self, key, value):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __repr__(self):
        return str(self)

    def _fields(self):
        return [(attribute, getattr(self, attribute)) for attribute, _ in self.fields]

    def as_dict(self):
        """ renders this value as a dictionary keyed by the device field names """
        return {key: render(getattr(self, attribute)) for attribute, key in self.fields}
