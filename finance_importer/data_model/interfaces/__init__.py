"""
Interfaces and Enums for the import data model.
"""

from .enum_column_role import ColumnRole
from .enum_date_format import DateFormat
from .enum_import_mode import ImportMode
from .enum_import_step import ImportStep
from .enum_transaction_type import TransactionType
from .i_category import ICategory, ISubcategory
from .i_ledger import IBackupRestorer, IImportApplier
from .i_to_dict import IToDict, JsonDict
from .i_transaction import ITransaction

__all__ = [
    "ColumnRole",
    "DateFormat",
    "ImportMode",
    "ImportStep",
    "TransactionType",
    "ICategory",
    "ISubcategory",
    "ITransaction",
    "IImportApplier",
    "IBackupRestorer",
    "IToDict",
    "JsonDict",
]
