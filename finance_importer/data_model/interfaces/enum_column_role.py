from enum import Enum


class ColumnRole(str, Enum):
    """
    Semantic role assigned to a raw table column.
    """
    DATE = "date"
    AMOUNT = "amount"
    DESCRIPTION = "description"
    CATEGORY = "category"
    SKIP = "skip"
