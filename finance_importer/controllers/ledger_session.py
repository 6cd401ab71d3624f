# finance_importer/controllers/ledger_session.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from finance_importer.data_model import (
    BackupData,
    CategoryItem,
    IBackupRestorer,
    IImportApplier,
    JsonDict,
    Transaction,
)
from finance_importer.utilities import open_for_read

log = logging.getLogger(__name__)


@dataclass
class LedgerSession:
    """
    In-memory destination of an import: the tracker's categories and transactions.

    Responsibilities:
    • Receive a finished import (``apply_import``) and a backup restore.
    • Upsert categories by id; on APPEND skip transactions already present.
    • Load from and save to the JSON backup format.
    """

    categories: List[CategoryItem] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    recurring_transactions: List[Dict[str, Any]] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None

    @property
    def has_transactions(self) -> bool:
        return bool(self.transactions)

    # --- Collaborator hooks ----------------------------------------------

    def _upsert_categories(self, new_categories: Sequence[CategoryItem]) -> None:
        index = {c.id: i for i, c in enumerate(self.categories)}
        for cat in new_categories:
            i = index.get(cat.id)
            if i is None:
                index[cat.id] = len(self.categories)
                self.categories.append(cat)
            else:
                self.categories[i] = cat

    def apply_import(
        self,
        transactions: Sequence[Transaction],
        clear_existing: bool,
        new_categories: Sequence[CategoryItem],
    ) -> int:
        """
        Merge a finished import. Returns the number of transactions added.

        ``clear_existing`` drops every stored transaction first; otherwise
        incoming transactions whose date, amount and description match a stored
        one are skipped.
        """
        self._upsert_categories(new_categories)
        if clear_existing:
            log.info("Clearing %d existing transactions", len(self.transactions))
            self.transactions = []
        seen = {t.signature for t in self.transactions}
        added = 0
        for t in transactions:
            if not clear_existing and t.signature in seen:
                log.debug("Skipping duplicate %s", t.signature)
                continue
            seen.add(t.signature)
            self.transactions.append(t)
            added += 1
        log.info(
            "Applied import: %d added, %d skipped, %d categories upserted",
            added,
            len(transactions) - added,
            len(new_categories),
        )
        return added

    def restore_backup(self, backup: BackupData) -> None:
        """Destructive replace of the whole ledger."""
        self.categories = [c.clone() for c in backup.categories]
        self.transactions = list(backup.transactions)
        self.recurring_transactions = [dict(r) for r in backup.recurring_transactions]
        self.settings = dict(backup.settings)
        log.info(
            "Restored backup: %d categories, %d transactions",
            len(self.categories),
            len(self.transactions),
        )

    # --- Persistence -----------------------------------------------------

    def export_backup(self) -> JsonDict:
        return BackupData(
            categories=self.categories,
            transactions=self.transactions,
            timestamp=datetime.now(timezone.utc).isoformat(),
            recurring_transactions=self.recurring_transactions,
            settings=self.settings,
        ).to_dict()

    @classmethod
    def from_backup_dict(cls, data: Mapping[str, Any]) -> "LedgerSession":
        session = cls()
        session.restore_backup(BackupData.from_dict(data))
        return session

    @classmethod
    def load(cls, path: Path, *, encoding: str = "utf-8") -> "LedgerSession":
        """Load a ledger from a backup file; a missing file gives an empty ledger."""
        path = Path(path)
        if not path.exists():
            log.info("Ledger %s does not exist yet; starting empty", path)
            return cls(path=path)
        log.info("Loading ledger: %s", path)
        with open_for_read(path, binary=False, encoding=encoding) as f:
            data = json.load(f)
        session = cls.from_backup_dict(data)
        session.path = path
        return session

    def save(self, path: Optional[Path] = None, *, encoding: str = "utf-8") -> Path:
        out = Path(path or self.path or "ledger.json")
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding=encoding) as f:
            json.dump(self.export_backup(), f, ensure_ascii=False, indent=2)
        log.info("Saved ledger (%d transactions) to %s", len(self.transactions), out)
        self.path = out
        return out


def load_categories(path: Path, *, encoding: str = "utf-8") -> List[CategoryItem]:
    """Read a JSON list of categories (or a backup's ``categories``)."""
    with open_for_read(Path(path), binary=False, encoding=encoding) as f:
        data = json.load(f)
    if isinstance(data, Mapping):
        data = data.get("categories", [])
    if not isinstance(data, list):
        raise ValueError(f"Categories file must hold a JSON list: {path}")
    return [CategoryItem.from_dict(c) for c in data]


if TYPE_CHECKING:
    _is_import_applier: type[IImportApplier] = LedgerSession
    _is_backup_restorer: type[IBackupRestorer] = LedgerSession
