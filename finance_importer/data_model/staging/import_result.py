from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..ledger import CategoryItem, Transaction


@dataclass(frozen=True)
class ImportResult:
    """What a finalized import handed to the destination, plus bookkeeping."""

    transactions: Tuple[Transaction, ...]
    clear_existing: bool
    new_categories: Tuple[CategoryItem, ...]
    dropped_count: int = 0
