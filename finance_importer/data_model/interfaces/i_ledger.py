# finance_importer/data_model/interfaces/i_ledger.py
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from typing_extensions import Protocol, runtime_checkable

from .i_category import ICategory
from .i_transaction import ITransaction

if TYPE_CHECKING:
    from ..ledger.backup_data import BackupData


@runtime_checkable
class IImportApplier(Protocol):
    """Destination of a finished import; called exactly once per successful run."""

    def apply_import(
        self,
        transactions: Sequence[ITransaction],
        clear_existing: bool,
        new_categories: Sequence[ICategory],
    ) -> object: ...


@runtime_checkable
class IBackupRestorer(Protocol):
    """Destructive full replace from a backup payload."""

    def restore_backup(self, backup: "BackupData") -> None: ...
