# finance_importer/data_model/interfaces/i_transaction.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from typing_extensions import Protocol, runtime_checkable

from .enum_transaction_type import TransactionType
from .i_to_dict import IToDict


@runtime_checkable
class ITransaction(IToDict, Protocol):
    """Structural shape of a finalized ledger transaction."""

    id: str
    date: str  # ISO-8601, built at local noon
    amount: Decimal  # never negative; direction lives in `type`
    description: str
    type: TransactionType
    category_id: str
    subcategory_id: Optional[str]
