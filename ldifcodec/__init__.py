"""A Pure-Python RFC2849 LDIF reader and writer"""
__version__ = "1.0.0"

__title__ = "ldifcodec"
__description__ = "A Pure-Python RFC2849 LDIF reader and writer"

__license__ = "MIT"
__author__ = "The ldifcodec developers"
__copyright__ = "Copyright (c) 2026 {}".format(__author__)
