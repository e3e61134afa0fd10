"""
Reading LDIF change records.

LDIFDelta is a line oriented state machine over a text stream. Records
are produced lazily, one at a time, and a reader can be iterated only
once; the stream stays owned by the caller.

    with open("changes.ldif", encoding="utf-8") as f:
        for record in parse(f):
            ...
"""

from urllib.parse import urlsplit
from urllib.request import url2pathname

from twisted.python import log
from twisted.python.filepath import FilePath
from twisted.python.util import InsensitiveDict

from ldifcodec import config, delta
from ldifcodec._encoder import to_unicode
from ldifcodec.insensitive import InsensitiveString
from ldifcodec.ldif import base64_decode
from ldifcodec.ldiferrors import (
    ChangeRecordValidationError,
    LDIFBase64DecodingError,
    LDIFDeltaInvalidAttributeTypeError,
    LDIFDeltaInvalidDeleteOldRDNError,
    LDIFDeltaModificationDifferentAttributeTypeError,
    LDIFDeltaModificationMissingEndDashError,
    LDIFDeltaUnknownModDNDirectiveError,
    LDIFDeltaUnknownModificationError,
    LDIFEmptyDNError,
    LDIFEntryStartsWithNonDNError,
    LDIFInvalidAttributeDescriptionError,
    LDIFInvalidRecordError,
    LDIFInvalidURIError,
    LDIFLineWithoutSeparatorError,
    LDIFTruncatedValueSpecError,
    LDIFUnknownChangeTypeError,
    LDIFURIDisabledError,
    LDIFURIResourceError,
    LDIFUsageError,
    LDIFUTF8DecodingError,
    LDIFVersionError,
)

WAIT_FOR_DN = "WAIT_FOR_DN"
WAIT_FOR_CHANGETYPE = "WAIT_FOR_CHANGETYPE"
IN_ADD_ENTRY = "IN_ADD_ENTRY"
IN_DELETE = "IN_DELETE"
IN_MODDN = "IN_MODDN"
IN_MODIFY = "IN_MODIFY"

CHANGE_TYPES = {
    "add": IN_ADD_ENTRY,
    "delete": IN_DELETE,
    "modrdn": IN_MODDN,
    "moddn": IN_MODDN,
    "modify": IN_MODIFY,
}

MOD_SPEC_END = "-"


class _Lines:
    """One line of lookahead over a text stream, line endings removed."""

    _nothing = object()

    def __init__(self, stream):
        self._iterator = iter(stream)
        self._peeked = self._nothing

    def peek(self):
        if self._peeked is self._nothing:
            self._peeked = self._next()
        return self._peeked

    def readline(self):
        line = self.peek()
        self._peeked = self._nothing
        return line

    def _next(self):
        line = next(self._iterator, None)
        if line is None:
            return None
        return line.rstrip("\r\n")


class _EntryBuilder:
    """
    The record being read. A fresh builder is made for every dn: line
    and dropped when the record is closed.
    """

    def __init__(self, dn):
        self.dn = dn
        self.changeType = None
        self.attributes = InsensitiveDict()
        self.modifications = []
        self.newRDN = None
        # A missing deleteoldrdn line means the old RDN goes.
        self.deleteOldRDN = True
        self.newSuperior = None

    def addValue(self, key, value):
        if key in self.attributes:
            self.attributes[key].append(value)
        else:
            self.attributes[key] = [value]

    def build(self):
        if self.changeType in (None, "add"):
            return delta.AddOp(self.dn, self.attributes.items())
        elif self.changeType == "delete":
            return delta.DeleteOp(self.dn)
        elif self.changeType in ("modrdn", "moddn"):
            return delta.ModDNOp(
                self.dn,
                newRDN=self.newRDN,
                deleteOldRDN=self.deleteOldRDN,
                newSuperior=self.newSuperior,
            )
        else:
            return delta.ModifyOp(self.dn, self.modifications)


class LDIFDelta:
    mode = WAIT_FOR_DN
    lineNumber = 0

    def __init__(self, stream, uriEnabled=None):
        """

        @param stream: a text stream, or any iterable of lines.

        @param uriEnabled: whether ``attr:< file:///...`` values are
        loaded. None means use the configured default.

        """
        if stream is None:
            raise LDIFUsageError("The stream can not be None")
        if isinstance(stream, (str, bytes)):
            raise LDIFUsageError("Expected a text stream, not a string")
        if uriEnabled is None:
            uriEnabled = config.uriEnabled()
        self.uriEnabled = uriEnabled
        self._lines = _Lines(stream)
        self._entry = None
        self._enumerated = False

    def __iter__(self):
        if self._enumerated:
            raise LDIFUsageError("LDIF records can only be read once")
        self._enumerated = True
        return self._parse()

    def _readline(self):
        line = self._lines.readline()
        if line is not None:
            self.lineNumber += 1
        return line

    def _unfold(self, line):
        while True:
            following = self._lines.peek()
            if following is None or not following.startswith(" "):
                return line
            line = line + self._readline()[1:]

    def _parse(self):
        # Leading comments and empty lines are tolerated although
        # RFC2849 does not allow the empty ones.
        while True:
            line = self._lines.peek()
            if line is not None and (line == "" or line.startswith("#")):
                self._readline()
                continue
            break

        line = self._lines.peek()
        if line is not None and line[:1] in ("v", "V"):
            self._readVersion(self._unfold(self._readline()))

        while True:
            line = self._readline()

            if line is None or line == "":
                if self.mode != WAIT_FOR_DN:
                    yield self._closeEntry()
                if line is None:
                    return
                # too many empty lines, but be tolerant
                continue

            if line.startswith("#"):
                continue

            if line[:8].lower() == "control:":
                log.msg("Skipping LDIF control at line %d" % self.lineNumber, debug=True)
                continue

            getattr(self, "state_" + self.mode)(line)

    def _readVersion(self, line):
        if line[:8].lower() != "version:":
            raise LDIFEntryStartsWithNonDNError(
                self.lineNumber, "LDIF must begin with version-spec or a record", line
            )
        _, val = self._parseLine(line)
        try:
            version = int(val)
        except (TypeError, ValueError):
            raise LDIFVersionError(self.lineNumber, line)
        if version != 1:
            raise LDIFVersionError(self.lineNumber, line)
        log.msg("Reading LDIF version %d" % version, debug=True)

    def _closeEntry(self):
        entry, self._entry = self._entry, None
        self.mode = WAIT_FOR_DN
        try:
            record = entry.build()
        except ChangeRecordValidationError as e:
            raise LDIFInvalidRecordError(
                self.lineNumber, entry.dn, e.reason, cause=e
            ) from e
        log.msg("Read %r ending at line %d" % (record, self.lineNumber), debug=True)
        return record

    def state_WAIT_FOR_DN(self, line):
        assert self._entry is None, "self._entry must not be set when waiting for DN"
        if line[:3].lower() != "dn:":
            raise LDIFEntryStartsWithNonDNError(self.lineNumber, line)

        _, val = self._parseLine(self._unfold(line))
        dn = self._decodeText(val, "distinguished name")
        if not dn.strip():
            raise LDIFEmptyDNError(self.lineNumber)

        self._entry = _EntryBuilder(dn)
        self.mode = WAIT_FOR_CHANGETYPE

    def state_WAIT_FOR_CHANGETYPE(self, line):
        assert self._entry is not None, "self._entry must be set when in entry"
        if line[:11].lower() != "changetype:":
            # no changetype, this is a change-add record
            self._entry.changeType = "add"
            self.mode = IN_ADD_ENTRY
            self.state_IN_ADD_ENTRY(line)
            return

        _, val = self._parseLine(self._unfold(line))
        changeType = self._decodeText(val, "changetype").strip().lower()
        if changeType not in CHANGE_TYPES:
            raise LDIFUnknownChangeTypeError(self.lineNumber, changeType)
        self._entry.changeType = changeType
        self.mode = CHANGE_TYPES[changeType]

    def state_IN_ADD_ENTRY(self, line):
        key, val = self._parseLine(self._unfold(line))
        self._entry.addValue(key, val)

    def state_IN_DELETE(self, line):
        pass

    def state_IN_MODDN(self, line):
        key, val = self._parseLine(self._unfold(line))
        directive = key.upper()
        if directive not in ("NEWRDN", "DELETEOLDRDN", "NEWSUPERIOR"):
            raise LDIFDeltaUnknownModDNDirectiveError(self.lineNumber, key)
        val = self._decodeText(val, key)

        if directive == "NEWRDN":
            self._entry.newRDN = val
        elif directive == "DELETEOLDRDN":
            try:
                deleteOldRDN = int(val)
            except ValueError:
                deleteOldRDN = None
            if deleteOldRDN not in (0, 1):
                raise LDIFDeltaInvalidDeleteOldRDNError(self.lineNumber, val)
            self._entry.deleteOldRDN = bool(deleteOldRDN)
        else:
            self._entry.newSuperior = val

    def state_IN_MODIFY(self, line):
        key, val = self._parseLine(self._unfold(line))

        modSpecType = key.lower()
        if modSpecType not in delta.MOD_SPEC_TYPES:
            raise LDIFDeltaUnknownModificationError(self.lineNumber, key)
        if not isinstance(val, str) or not val.strip():
            raise LDIFDeltaInvalidAttributeTypeError(self.lineNumber, repr(val))
        attributeType = InsensitiveString(val.strip())

        values = []
        while True:
            following = self._lines.peek()
            if following is not None and following.rstrip() == MOD_SPEC_END:
                self._readline()
                break

            line = self._readline()
            if line is None or not line.strip():
                raise LDIFDeltaModificationMissingEndDashError(self.lineNumber)
            if line.startswith("#"):
                continue
            if line[:8].lower() == "control:":
                log.msg("Skipping LDIF control at line %d" % self.lineNumber, debug=True)
                continue

            key, val = self._parseLine(self._unfold(line))
            if attributeType != key:
                raise LDIFDeltaModificationDifferentAttributeTypeError(
                    self.lineNumber,
                    'expected "%s" but found "%s"' % (attributeType, key),
                )
            values.append(val)

        try:
            modification = delta.modSpec(modSpecType, attributeType, values)
        except ChangeRecordValidationError as e:
            raise LDIFInvalidRecordError(
                self.lineNumber, self._entry.dn, e.reason, cause=e
            ) from e
        self._entry.modifications.append(modification)

    def _parseLine(self, line):
        """
        Split an unfolded line into its attribute description and the
        decoded value.

        The attribute description is returned as written, options
        included (eg. ``userCertificate;binary``). The value is text
        (str) for a plain value-spec and binary (bytes) for base64 and
        URI value-specs.
        """
        key, sep, val = line.partition(":")
        if not sep:
            raise LDIFLineWithoutSeparatorError(self.lineNumber, line)
        if not key.split(";", 1)[0].strip():
            raise LDIFInvalidAttributeDescriptionError(self.lineNumber, line)
        return key, self._parseValue(val)

    def _parseValue(self, val):
        if not val:
            # RFC2849 note 5.
            return ""

        first = val[0]
        if first == " ":
            return val[1:]
        if first not in (":", "<"):
            return val
        if len(val) == 1:
            raise LDIFTruncatedValueSpecError(self.lineNumber)

        encoded = first == ":"
        if encoded:
            uri = val[1] == "<"
            payload = val[2:] if uri else val[1:]
        else:
            uri = True
            payload = val[1:]
        payload = payload.lstrip(" ")

        if encoded:
            try:
                value = base64_decode(payload)
            except ValueError as e:
                raise LDIFBase64DecodingError(self.lineNumber, cause=e) from e
        else:
            value = payload

        if uri:
            value = self._loadURI(value)
        return value

    def _loadURI(self, value):
        if not self.uriEnabled:
            raise LDIFURIDisabledError(self.lineNumber)

        uriString = self._decodeText(value, "URI").strip()
        try:
            parts = urlsplit(uriString)
        except ValueError as e:
            raise LDIFInvalidURIError(self.lineNumber, uriString, cause=e) from e
        if parts.scheme.lower() != "file" or not parts.path:
            raise LDIFInvalidURIError(self.lineNumber, uriString)

        try:
            return FilePath(url2pathname(parts.path)).getContent()
        except (OSError, ValueError) as e:
            raise LDIFURIResourceError(self.lineNumber, uriString, cause=e) from e

    def _decodeText(self, value, what):
        try:
            return to_unicode(value)
        except UnicodeDecodeError as e:
            raise LDIFUTF8DecodingError(self.lineNumber, what, cause=e) from e


def parse(stream, uriEnabled=None):
    """
    Read change records from a text stream.

    @return: an LDIFDelta, to be iterated once.
    """
    return LDIFDelta(stream, uriEnabled=uriEnabled)


def fromLDIFFile(f, uriEnabled=None):
    """Read all LDIF change records from a file."""
    return list(parse(f, uriEnabled=uriEnabled))
