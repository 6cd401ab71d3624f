from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from finance_importer.utilities import to_bool, to_decimal

from ..interfaces import IToDict, ITransaction, JsonDict, TransactionType


@dataclass
class Transaction:
    """
    Normalized ledger record emitted by a finished import.

    ``amount`` is never negative; direction lives in ``type``.
    """

    id: str
    date: str
    amount: Decimal
    description: str
    type: TransactionType
    category_id: str
    subcategory_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_recurring: bool = False

    @property
    def signature(self) -> str:
        """Duplicate-detection key used when appending to an existing ledger."""
        return f"{self.date}-{self.amount.normalize():f}-{self.description}"

    def to_dict(self) -> JsonDict:
        out: JsonDict = {
            "id": self.id,
            "date": self.date,
            "amount": float(self.amount),
            "description": self.description,
            "type": self.type.value,
            "categoryId": self.category_id,
        }
        if self.subcategory_id is not None:
            out["subcategoryId"] = self.subcategory_id
        if self.tags:
            out["tags"] = list(self.tags)
        if self.is_recurring:
            out["isRecurring"] = True
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        sub = data.get("subcategoryId", data.get("subcategory_id"))
        return cls(
            id=str(data.get("id", "")),
            date=str(data.get("date", "")),
            amount=abs(to_decimal(data.get("amount", 0))),
            description=str(data.get("description", "")),
            type=TransactionType(str(data.get("type", TransactionType.EXPENSE.value)).upper()),
            category_id=str(data.get("categoryId", data.get("category_id", ""))),
            subcategory_id=None if sub in (None, "") else str(sub),
            tags=[str(t) for t in data.get("tags") or []],
            is_recurring=to_bool(data.get("isRecurring", data.get("is_recurring", False))),
        )


if TYPE_CHECKING:
    _is_i_transaction: type[ITransaction] = Transaction
    _is_IToDict: type[IToDict] = Transaction
