from functools import cmp_to_key

from ldifcodec.ldiferrors import LDIFUsageError


class InsensitiveString(str):
    """A str subclass that performs all matching without regard to case."""

    def __eq__(self, other):
        if isinstance(other, str):
            return self.lower() == other.lower()
        else:
            return super().__eq__(other)

    def __ne__(self, other):
        if isinstance(other, str):
            return self.lower() != other.lower()
        else:
            return super().__ne__(other)

    def __ge__(self, other):
        if isinstance(other, str):
            return self.lower() >= other.lower()
        else:
            return super().__ge__(other)

    def __gt__(self, other):
        if isinstance(other, str):
            return self.lower() > other.lower()
        else:
            return super().__gt__(other)

    def __le__(self, other):
        if isinstance(other, str):
            return self.lower() <= other.lower()
        else:
            return super().__le__(other)

    def __lt__(self, other):
        if isinstance(other, str):
            return self.lower() < other.lower()
        else:
            return super().__lt__(other)

    def __hash__(self):
        return hash(self.lower())

    def __contains__(self, other):
        if isinstance(other, str):
            return other.lower() in self.lower()
        else:
            return super().__contains__(other)


OBJECT_CLASS = InsensitiveString("objectClass")


def _checkOperand(name, value):
    if value is None or not value.strip():
        raise LDIFUsageError(
            "The attribute type %s can not be None, empty or whitespace" % name
        )


def compareAttributeTypes(x, y):
    """
    Order attribute types for writing: objectClass always comes first,
    every other type sorts without regard to case.

    @return: a negative number, zero or a positive number, as for
    C{cmp}.
    """
    _checkOperand("x", x)
    _checkOperand("y", y)

    xIsObjectClass = OBJECT_CLASS == x
    yIsObjectClass = OBJECT_CLASS == y
    if xIsObjectClass and yIsObjectClass:
        return 0
    if xIsObjectClass:
        return -1
    if yIsObjectClass:
        return 1

    x, y = x.upper(), y.upper()
    return (x > y) - (x < y)


attributeTypeKey = cmp_to_key(compareAttributeTypes)
