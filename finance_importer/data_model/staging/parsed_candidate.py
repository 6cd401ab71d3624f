from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from ..interfaces import DateFormat


@dataclass(frozen=True)
class ParsedCandidate:
    """One mapped source row before its date has been validated."""

    date_str: str
    signed_amount: Decimal
    description: str
    category_name_raw: str  # "" when the row supplied no category cell
    source_row: Tuple[str, ...]
    row_index: int = -1

    @property
    def has_explicit_category(self) -> bool:
        return self.category_name_raw != ""

    @property
    def is_blank(self) -> bool:
        """Zero amount and no date: a separator/noise line, neither valid nor failed."""
        return self.signed_amount == 0 and self.date_str == ""


@dataclass(frozen=True)
class FailedRow:
    """A candidate whose date did not parse under the format it was tried with."""

    candidate: ParsedCandidate
    attempted_format: DateFormat

    @property
    def date_str(self) -> str:
        return self.candidate.date_str
