from ldifcodec.insensitive import InsensitiveString
from ldifcodec._encoder import freeze_values
from ldifcodec.ldiferrors import ChangeRecordValidationError


class LDIFAttribute:
    def __init__(self, key, values=None):
        """
        Represents all the values for one attribute type of a change-add
        record, eg. "cn" or "objectClass".

        You can find the attribute type with the ``.key`` member
        variable. It keeps the casing it was given but compares without
        regard to case.

        The values keep the order they were given in. Each is either text
        (str) or binary (bytes).

        @param key: the attribute type, eg "uid".
        @type key: str
        @param values: values for this attribute, eg. ["jsmith"]
        """
        if key is None or not key.strip():
            raise ChangeRecordValidationError(
                "attributeType", "The attribute type can not be empty or whitespace"
            )
        self.key = InsensitiveString(key)
        self._values = freeze_values(values)

    @property
    def values(self):
        return list(self._values)

    def __len__(self):
        return len(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __iter__(self):
        return iter(self._values)

    def __repr__(self):
        return "%s(%r, %r)" % (self.__class__.__name__, str(self.key), list(self._values))

    def __eq__(self, other):
        """
        Note that LDIFAttributes can also be compared against any
        iterable. In that case the attribute type is ignored.
        """
        if isinstance(other, LDIFAttribute):
            if self.key != other.key:
                return False
            return self._values == other._values
        try:
            return list(self._values) == list(other)
        except TypeError:
            return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.key, self._values))
