from enum import Enum


class DateFormat(str, Enum):
    """
    Day/month/year ordering used to read an ambiguous date string.

    A parse mode, not a value: separators ('.', '-', '/') are accepted in all modes.
    """
    YYYY_MM_DD = "YYYY-MM-DD"
    DD_MM_YYYY = "DD-MM-YYYY"
    MM_DD_YYYY = "MM-DD-YYYY"
