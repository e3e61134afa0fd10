"""
Support for writing change records as LDIF.

The value-spec rules of RFC2849 decide whether a value can go on the
wire as is (SAFE-STRING) or must be base64 encoded; composed lines are
then folded at 76 columns.
"""

# RFC2849: The LDAP Data Interchange Format (LDIF) - Technical Specification

import base64

from ldifcodec._encoder import to_bytes, is_text, is_binary
from ldifcodec.ldiferrors import ChangeRecordValidationError, LDIFInvalidValueError

LINE_WIDTH = 76
LINE_SEPARATOR = "\n"
CONTINUATION = LINE_SEPARATOR + " "

# RFC2849 note 4.
SAFE_CHARS = frozenset(range(1, 128)) - frozenset([0, 10, 13])
SAFE_INIT_CHARS = SAFE_CHARS - frozenset([32, 58, 60])


def base64_encode(s):
    return base64.b64encode(to_bytes(s)).decode("ascii")


def base64_decode(s):
    """
    Decode standard, padded base64. Raises ValueError (binascii.Error)
    on malformed input.
    """
    return base64.b64decode(s, validate=True)


def isSafeInitialChar(value):
    data = to_bytes(value)
    if not data:
        # RFC2849 note 5.
        return True
    return data[0] in SAFE_INIT_CHARS


def isSafeString(value):
    data = to_bytes(value)
    if not data:
        return True
    # RFC2849 note 8.
    if data[-1] == 32:
        return False
    for c in data:
        if c not in SAFE_CHARS:
            return False
    return True


def valueSpec(attributeType, value):
    """
    Compose the unfolded value-spec line for one value.

    Text that is safe on the wire is written as ``type: value``, other
    text goes out as the base64 of its UTF-8 encoding. Binary values are
    always base64 encoded.

    @param attributeType: the attribute type (or directive) name.
    @type attributeType: str

    @param value: the value to write.
    @type value: str, bytes or bytearray
    """
    if not attributeType or not attributeType.strip():
        raise ChangeRecordValidationError(
            "attributeType", "The attribute type can not be empty or whitespace"
        )
    if is_text(value):
        if isSafeInitialChar(value) and isSafeString(value):
            return "%s: %s" % (attributeType, value)
    elif not is_binary(value):
        raise LDIFInvalidValueError(attributeType, type(value).__name__)
    return "%s:: %s" % (attributeType, base64_encode(value))


def wrap(line):
    """
    Fold a composed line: the first segment holds up to 76 characters,
    every continuation holds 75 after its leading space.
    """
    if len(line) <= LINE_WIDTH:
        return line
    segments = [line[:LINE_WIDTH]]
    rest = line[LINE_WIDTH:]
    while rest:
        segments.append(rest[: LINE_WIDTH - 1])
        rest = rest[LINE_WIDTH - 1 :]
    return CONTINUATION.join(segments)


def unwrap(text):
    """Undo L{wrap}."""
    segments = text.replace("\r\n", "\n").split("\n")
    return segments[0] + "".join(s[1:] for s in segments[1:])


def attributeAsLDIF(attributeType, value):
    return wrap(valueSpec(attributeType, value)) + LINE_SEPARATOR


def _header():
    return "version: 1" + LINE_SEPARATOR + LINE_SEPARATOR


def manyAsLDIF(records):
    """Write a complete LDIF document, version header included."""
    s = [_header()]
    for record in records:
        s.append(record.asLDIF())
    return "".join(s)
