"""
Just enough distinguished name handling to find the RDN of an entry.
"""


def splitOnNotEscaped(s, separator=","):
    """
    Split s on every separator that is not immediately preceded by a
    backslash. No other unescaping or whitespace handling is done.
    """
    if not s:
        return []

    r = [""]
    previous = ""
    for c in s:
        if c == separator and previous != "\\":
            r.append("")
        else:
            r[-1] = r[-1] + c
        previous = c
    return r


def firstRDN(dn):
    """The leading RDN of dn, as written."""
    components = splitOnNotEscaped(dn)
    if not components:
        return ""
    return components[0]
