from enum import Enum


class ImportMode(str, Enum):
    """
    What to do with the destination's existing transactions at finalization.
    """
    APPEND = "APPEND"
    REPLACE = "REPLACE"
