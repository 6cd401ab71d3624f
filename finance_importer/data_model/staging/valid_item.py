from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..interfaces import TransactionType
from .parsed_candidate import ParsedCandidate


@dataclass(frozen=True)
class ValidItem:
    """
    A candidate with a confirmed date, ready for grouping and finalization.

    Category and subcategory are still *names*; ids are assigned only when the
    import is finalized.
    """

    id: str
    date: str  # ISO-8601
    amount: Decimal  # absolute value
    description: str
    type: TransactionType
    category_name: str
    candidate: ParsedCandidate
    subcategory_name: Optional[str] = None
