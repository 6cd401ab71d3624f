from __future__ import annotations

from typing import List, Optional

from typing_extensions import Protocol, runtime_checkable

from .enum_transaction_type import TransactionType
from .i_to_dict import IToDict


@runtime_checkable
class ISubcategory(Protocol):
    id: str
    name: str


@runtime_checkable
class ICategory(IToDict, Protocol):
    """
    Protocol for taxonomy entries consumed and produced by an import.

    A conforming object should expose at least:
      - id: stable identifier, the key the destination store upserts by
      - name: display name; identity during an import is its trimmed lower-case form
      - type: INCOME or EXPENSE
      - color: display color (hex)
      - is_system: category is owned by the application
      - is_included_in_savings: optional savings/investment flag
      - subcategories: ordered child entries
    """

    id: str
    name: str
    type: TransactionType
    color: str
    is_system: bool
    is_included_in_savings: Optional[bool]
    subcategories: List[ISubcategory]
