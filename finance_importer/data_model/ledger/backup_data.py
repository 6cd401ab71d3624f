# finance_importer/data_model/ledger/backup_data.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from ..interfaces import JsonDict
from .category_item import CategoryItem
from .transaction import Transaction

BACKUP_VERSION = 1


@dataclass
class BackupData:
    """
    Full export of the tracker: the payload of a destructive restore.

    Recurring transactions and settings belong to subsystems outside the import
    pipeline, so they are carried as plain dictionaries. Unknown top-level keys
    are kept in ``extra`` and written back by ``to_dict``.
    """

    categories: List[CategoryItem]
    transactions: List[Transaction]
    version: int = BACKUP_VERSION
    timestamp: str = ""
    recurring_transactions: List[Dict[str, Any]] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def looks_like_backup(value: Any) -> bool:
        """A backup is an object with array-valued ``categories`` and ``transactions``."""
        return (
            isinstance(value, Mapping)
            and isinstance(value.get("categories"), list)
            and isinstance(value.get("transactions"), list)
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BackupData":
        """
        Build from a decoded backup JSON object.

        Raises
        ------
        ValueError
            If ``data`` is not backup-shaped or an entry cannot be converted.
        """
        if not cls.looks_like_backup(data):
            raise ValueError("Backup must contain 'categories' and 'transactions' arrays.")
        known = {"version", "timestamp", "categories", "transactions", "recurringTransactions", "settings"}
        try:
            categories = [CategoryItem.from_dict(c) for c in data["categories"]]
            transactions = [Transaction.from_dict(t) for t in data["transactions"]]
            version = int(data.get("version", BACKUP_VERSION))
            recurring = data.get("recurringTransactions") or []
            if not isinstance(recurring, list):
                raise ValueError("'recurringTransactions' must be an array")
            settings = data.get("settings") or {}
            if not isinstance(settings, Mapping):
                raise ValueError("'settings' must be an object")
        except (AttributeError, TypeError, ValueError) as exc:
            raise ValueError(f"Backup entry could not be read: {exc}") from exc
        return cls(
            categories=categories,
            transactions=transactions,
            version=version,
            timestamp=str(data.get("timestamp", "")),
            recurring_transactions=list(recurring),
            settings=dict(settings),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> JsonDict:
        out: JsonDict = dict(self.extra)
        out.update(
            {
                "version": self.version,
                "timestamp": self.timestamp or datetime.now(timezone.utc).isoformat(),
                "categories": [c.to_dict() for c in self.categories],
                "transactions": [t.to_dict() for t in self.transactions],
                "recurringTransactions": list(self.recurring_transactions),
                "settings": dict(self.settings),
            }
        )
        return out
