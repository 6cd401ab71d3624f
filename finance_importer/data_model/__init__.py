# finance_importer/data_model/__init__.py
from .interfaces import (
    ColumnRole, DateFormat, ImportMode, ImportStep, TransactionType,
    ICategory, ISubcategory, ITransaction, IImportApplier, IBackupRestorer,
    IToDict, JsonDict)
from .ledger import BackupData, CategoryItem, SubcategoryItem, Transaction
from .staging import (
    FailedRow, GroupedTransaction, ImportResult, ParsedCandidate, ValidItem)
__all__ = [
    "ColumnRole", "DateFormat", "ImportMode", "ImportStep", "TransactionType",
    "ICategory", "ISubcategory", "ITransaction", "IImportApplier",
    "IBackupRestorer", "IToDict", "JsonDict", "BackupData", "CategoryItem",
    "SubcategoryItem", "Transaction", "FailedRow", "GroupedTransaction",
    "ImportResult", "ParsedCandidate", "ValidItem"]
