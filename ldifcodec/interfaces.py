from zope.interface import Interface, Attribute


class IChangeRecord(Interface):
    """
    One LDIF change record: a change-add, change-delete, change-moddn or
    change-modify of a single entry.

    Change records are immutable values. Two records are equal when
    their fields are.
    """

    dn = Attribute("The distinguished name of the entry the change applies to, as text.")

    def asLDIF():
        """

        Serialize as an LDIF change record.

        The result ends with the empty line that separates records,
        eg. for a change-delete record::

            dn: cn=foo,dc=example,dc=com
            changetype: delete

        """
