"""
Exceptions raised while reading, writing and building LDIF change records.

Parse failures are tagged with the line number at which they were
detected and, where another exception triggered them, keep it as
``cause`` (and as ``__cause__``, they are raised with ``raise ... from``).
"""


class LDIFError(Exception):
    """LDIF error"""

    def __str__(self):
        s = self.__doc__
        if self.args:
            s = ": ".join([s] + [str(x) for x in self.args])
        return s + "."


class LDIFParseError(LDIFError):
    """Error parsing LDIF"""

    def __init__(self, lineNumber, *details, cause=None):
        super().__init__(*details)
        self.lineNumber = lineNumber
        self.cause = cause

    def __str__(self):
        return "Line %d: %s" % (self.lineNumber, super().__str__())


class LDIFFormatError(LDIFParseError):
    """Malformed LDIF"""


class LDIFLineWithoutSeparatorError(LDIFFormatError):
    """Attribute type and value separator not found"""


class LDIFInvalidAttributeDescriptionError(LDIFFormatError):
    """Failed to read attrval-spec"""


class LDIFTruncatedValueSpecError(LDIFFormatError):
    """The value-spec is truncated"""


class LDIFVersionError(LDIFFormatError):
    """Invalid LDIF version spec"""


class LDIFEntryStartsWithNonDNError(LDIFFormatError):
    """A new entry was not initialized with a distinguished name"""


class LDIFEmptyDNError(LDIFFormatError):
    """Distinguished name is empty"""


class LDIFUnknownChangeTypeError(LDIFFormatError):
    """Invalid changetype specified"""


class LDIFDeltaUnknownModificationError(LDIFFormatError):
    """Invalid mod-spec in change-modify entry"""


class LDIFDeltaInvalidAttributeTypeError(LDIFFormatError):
    """Failed to read attrval-spec in change-modify entry"""


class LDIFDeltaModificationDifferentAttributeTypeError(LDIFFormatError):
    """Inconsistent changetype modify entry"""


class LDIFDeltaModificationMissingEndDashError(LDIFFormatError):
    """Invalid changetype modify entry, unexpected empty line"""


class LDIFDeltaInvalidDeleteOldRDNError(LDIFFormatError):
    """Invalid deleteoldrdn value"""


class LDIFDeltaUnknownModDNDirectiveError(LDIFFormatError):
    """Invalid moddn entry"""


class LDIFInvalidRecordError(LDIFFormatError):
    """Invalid change record"""


class LDIFDecodingError(LDIFParseError):
    """Failed to decode LDIF value"""


class LDIFBase64DecodingError(LDIFDecodingError):
    """Failed to decode BASE64 data"""


class LDIFUTF8DecodingError(LDIFDecodingError):
    """Failed to decode UTF-8 data"""


class LDIFResourceError(LDIFParseError):
    """Failed to load URI based resource"""


class LDIFURIDisabledError(LDIFResourceError):
    """URI value-spec not enabled"""


class LDIFInvalidURIError(LDIFResourceError):
    """Invalid URI format"""


class LDIFURIResourceError(LDIFResourceError):
    """Failed to load URI based resource"""


class ChangeRecordValidationError(LDIFError, ValueError):
    """Invalid change record"""

    def __init__(self, field, reason):
        super().__init__(field, reason)
        self.field = field
        self.reason = reason


class LDIFInvalidValueError(LDIFError, TypeError):
    """Attribute value must be text or binary"""


class LDIFUsageError(LDIFError):
    """Invalid use of the LDIF API"""
