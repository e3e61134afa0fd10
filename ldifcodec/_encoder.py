"""
    Encoding / decoding utilities
"""

from ldifcodec.ldiferrors import LDIFInvalidValueError


def to_bytes(value):
    """
    Converts value to its bytes representation:

    * Encodes to utf-8 if the value is a unicode string
    * Copies bytes and bytearray values into bytes
    * Anything else is neither text nor binary and is refused
    """
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise LDIFInvalidValueError(type(value).__name__)


def to_unicode(value):
    """
    Converts string to unicode:

    * Decodes value from utf-8 if it is a byte string, invalid
      sequences raise UnicodeDecodeError
    * Otherwise just returns the same value
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", "strict")
    return value


def is_text(value):
    return isinstance(value, str)


def is_binary(value):
    return isinstance(value, (bytes, bytearray))


def freeze_values(values):
    """
    Tuple of values for storing in an immutable record, bytearray values
    become bytes.

    A single str or bytes is not a list of values, and every value must
    be text or binary.
    """
    if values is None:
        return ()
    if isinstance(values, (str, bytes, bytearray)):
        raise LDIFInvalidValueError(
            "expected a list of values, not %s" % type(values).__name__
        )
    frozen = []
    for v in values:
        if not (is_text(v) or is_binary(v)):
            raise LDIFInvalidValueError(type(v).__name__)
        frozen.append(bytes(v) if isinstance(v, bytearray) else v)
    return tuple(frozen)
