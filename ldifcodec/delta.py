"""
LDIF change records.

Adding, deleting, renaming and modifying of one single LDAP entry, as
read from or written to an LDIF file. All records are immutable values
and serialize themselves with asLDIF().
"""

from twisted.python.util import InsensitiveDict
from zope.interface import implementer

from ldifcodec import interfaces
from ldifcodec._encoder import freeze_values
from ldifcodec.attributeset import LDIFAttribute
from ldifcodec.distinguishedname import firstRDN
from ldifcodec.insensitive import InsensitiveString, attributeTypeKey
from ldifcodec.ldif import LINE_SEPARATOR, attributeAsLDIF
from ldifcodec.ldiferrors import ChangeRecordValidationError


def _checkNotBlank(field, value, what):
    if not isinstance(value, str) or not value.strip():
        raise ChangeRecordValidationError(
            field, "The %s can not be None, empty or whitespace" % what
        )


class Modification:
    """
    One mod-spec of a change-modify record: the kind of modification,
    the attribute type it applies to and its values.
    """

    modSpecType = None

    def __init__(self, key, values=None):
        if self.modSpecType is None:
            raise ChangeRecordValidationError(
                "modSpecType", "Unknown mod-spec %r" % self.__class__.__name__
            )
        _checkNotBlank("attributeType", key, "attribute type")
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

    def asLDIF(self):
        r = []
        r.append(attributeAsLDIF(self.modSpecType, self.key))
        for v in self._values:
            r.append(attributeAsLDIF(self.key, v))
        r.append("-" + LINE_SEPARATOR)
        return "".join(r)

    def __repr__(self):
        return "%s(%r, %r)" % (self.__class__.__name__, str(self.key), list(self._values))

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.key == other.key and self._values == other._values

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.modSpecType, self.key, self._values))


class Add(Modification):
    modSpecType = "add"

    def __init__(self, key, values=None):
        super().__init__(key, values)
        if not self._values:
            raise ChangeRecordValidationError(
                "values",
                "At least one attribute value must be present with an add mod-spec",
            )


class Delete(Modification):
    modSpecType = "delete"


class Replace(Modification):
    modSpecType = "replace"


MOD_SPEC_TYPES = {
    "add": Add,
    "delete": Delete,
    "replace": Replace,
}


def modSpec(modSpecType, key, values=None):
    """
    Build the mod-spec named by modSpecType ("add", "delete" or
    "replace", in any case).
    """
    klass = None
    if isinstance(modSpecType, str):
        klass = MOD_SPEC_TYPES.get(modSpecType.lower())
    if klass is None:
        raise ChangeRecordValidationError(
            "modSpecType", "Unknown mod-spec %r" % (modSpecType,)
        )
    return klass(key, values)


class Operation:
    changeType = None

    def __init__(self, dn):
        _checkNotBlank("dn", dn, "distinguished name")
        self.dn = dn

    def asLDIF(self):
        r = [attributeAsLDIF("dn", self.dn)]
        r.extend(self._bodyAsLDIF())
        r.append(LINE_SEPARATOR)
        return "".join(r)

    def _bodyAsLDIF(self):
        raise NotImplementedError

    def _fields(self):
        return (self.dn,)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self._fields() == other._fields()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.__class__.__name__,) + self._fields())


@implementer(interfaces.IChangeRecord)
class AddOp(Operation):
    changeType = "add"

    def __init__(self, dn, attributes=()):
        """

        @param dn: distinguished name of the new entry, as text.

        @param attributes: the LDIFAttributes of the entry. A mapping of
        attribute types to lists of values, or an iterable of
        (attribute type, values) pairs, is accepted as well. An
        attribute type may appear only once, regardless of case;
        attributes without values are left out.

        """
        super().__init__(dn)
        if attributes is None:
            attributes = ()
        elif hasattr(attributes, "items"):
            attributes = attributes.items()

        self._attributes = InsensitiveDict()
        seen = InsensitiveDict()
        for attribute in attributes:
            if not isinstance(attribute, LDIFAttribute):
                key, values = attribute
                attribute = LDIFAttribute(key, values)
            if attribute.key in seen:
                raise ChangeRecordValidationError(
                    "attributes",
                    "Duplicate attribute type %r" % str(attribute.key),
                )
            seen[attribute.key] = True
            # attributes without values are dropped
            if len(attribute):
                self._attributes[attribute.key] = attribute

        self._ordered = tuple(
            sorted(self._attributes.values(), key=lambda a: attributeTypeKey(a.key))
        )

    def attributeTypes(self):
        return [a.key for a in self._ordered]

    def __getitem__(self, key):
        return self._attributes[key]

    def get(self, key, default=None):
        if key in self._attributes:
            return self._attributes[key]
        return default

    def __contains__(self, key):
        return key in self._attributes

    def __iter__(self):
        return iter(self._ordered)

    def __len__(self):
        return len(self._ordered)

    def _bodyAsLDIF(self):
        for attribute in self._ordered:
            for value in attribute:
                yield attributeAsLDIF(attribute.key, value)

    def _fields(self):
        return (self.dn, self._ordered)

    def __repr__(self):
        return "%s(dn=%r, attributes=%r)" % (
            self.__class__.__name__,
            self.dn,
            list(self._ordered),
        )


@implementer(interfaces.IChangeRecord)
class DeleteOp(Operation):
    changeType = "delete"

    def _bodyAsLDIF(self):
        yield "changetype: delete" + LINE_SEPARATOR

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.dn)


@implementer(interfaces.IChangeRecord)
class ModDNOp(Operation):
    changeType = "modrdn"

    def __init__(self, dn, newRDN=None, deleteOldRDN=False, newSuperior=None):
        """

        Rename and/or move an entry.

        @param newRDN: the new RDN. Defaults to the current RDN of dn, in
        which case newSuperior must be given.

        @param deleteOldRDN: whether the old RDN values are removed from
        the entry.

        @param newSuperior: the DN of the new parent entry, if the entry
        moves.

        """
        super().__init__(dn)
        if newRDN is not None:
            _checkNotBlank("newRDN", newRDN, "new rdn")
        if newSuperior is not None:
            _checkNotBlank("newSuperior", newSuperior, "new superior")
        if newRDN is None and newSuperior is None:
            raise ChangeRecordValidationError(
                "newRDN", "At least one of newRDN or newSuperior must be specified"
            )

        rdn = firstRDN(dn)
        if newRDN is None:
            newRDN = rdn
        elif newSuperior is None and newRDN.lower() == rdn.lower():
            raise ChangeRecordValidationError("newRDN", "No changes detected")

        self.newRDN = newRDN
        self.deleteOldRDN = bool(deleteOldRDN)
        self.newSuperior = newSuperior

    def _bodyAsLDIF(self):
        yield "changetype: modrdn" + LINE_SEPARATOR
        yield attributeAsLDIF("newrdn", self.newRDN)
        yield "deleteoldrdn: %d" % int(self.deleteOldRDN) + LINE_SEPARATOR
        if self.newSuperior is not None:
            yield attributeAsLDIF("newsuperior", self.newSuperior)

    def _fields(self):
        return (self.dn, self.newRDN, self.deleteOldRDN, self.newSuperior)

    def __repr__(self):
        return "%s(dn=%r, newRDN=%r, deleteOldRDN=%r, newSuperior=%r)" % (
            self.__class__.__name__,
            self.dn,
            self.newRDN,
            self.deleteOldRDN,
            self.newSuperior,
        )


@implementer(interfaces.IChangeRecord)
class ModifyOp(Operation):
    changeType = "modify"

    def __init__(self, dn, modifications):
        super().__init__(dn)
        if modifications is None:
            raise ChangeRecordValidationError(
                "modifications", "The mod-spec entries can not be None"
            )
        self.modifications = tuple(modifications)
        for m in self.modifications:
            if not isinstance(m, Modification):
                raise ChangeRecordValidationError(
                    "modifications", "Not a mod-spec: %r" % (m,)
                )
        if not self.modifications:
            raise ChangeRecordValidationError(
                "modifications", "At least one mod-spec must be present"
            )

    def __iter__(self):
        return iter(self.modifications)

    def __len__(self):
        return len(self.modifications)

    def _bodyAsLDIF(self):
        yield "changetype: modify" + LINE_SEPARATOR
        for m in self.modifications:
            yield m.asLDIF()

    def _fields(self):
        return (self.dn, self.modifications)

    def __repr__(self):
        return "%s(dn=%r, modifications=%r)" % (
            self.__class__.__name__,
            self.dn,
            list(self.modifications),
        )
