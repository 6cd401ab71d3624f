from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from finance_importer.utilities import normalize_key, to_bool

from ..interfaces import ICategory, ISubcategory, IToDict, JsonDict, TransactionType


@dataclass(frozen=True)
class SubcategoryItem:
    id: str
    name: str

    def to_dict(self) -> JsonDict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubcategoryItem":
        return cls(id=str(data.get("id", "")), name=str(data.get("name", "")))


@dataclass
class CategoryItem:
    """
    A taxonomy entry as stored by the finance tracker.

    Serialized with the tracker's camelCase keys (``isSystem``,
    ``isIncludedInSavings``, ``budgetLimit``) so backups round-trip unchanged.
    """

    id: str
    name: str
    type: TransactionType = TransactionType.EXPENSE
    color: str = "#64748b"
    is_system: bool = False
    is_included_in_savings: Optional[bool] = None
    budget_limit: Optional[float] = None
    subcategories: List[SubcategoryItem] = field(default_factory=list)

    @property
    def key(self) -> str:
        return normalize_key(self.name)

    def find_subcategory(self, name: str) -> Optional[SubcategoryItem]:
        wanted = normalize_key(name)
        for sub in self.subcategories:
            if normalize_key(sub.name) == wanted:
                return sub
        return None

    def clone(self) -> "CategoryItem":
        """Shallow copy with its own subcategory list; the source is left untouched."""
        return CategoryItem(
            id=self.id,
            name=self.name,
            type=self.type,
            color=self.color,
            is_system=self.is_system,
            is_included_in_savings=self.is_included_in_savings,
            budget_limit=self.budget_limit,
            subcategories=list(self.subcategories),
        )

    def to_dict(self) -> JsonDict:
        out: JsonDict = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "color": self.color,
            "isSystem": self.is_system,
            "subcategories": [s.to_dict() for s in self.subcategories],
        }
        if self.is_included_in_savings is not None:
            out["isIncludedInSavings"] = self.is_included_in_savings
        if self.budget_limit is not None:
            out["budgetLimit"] = self.budget_limit
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CategoryItem":
        """Accepts both the tracker's camelCase keys and snake_case."""
        savings = _pick(data, "isIncludedInSavings", "is_included_in_savings")
        budget = _pick(data, "budgetLimit", "budget_limit")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            type=TransactionType(str(data.get("type", TransactionType.EXPENSE.value)).upper()),
            color=str(data.get("color", "#64748b")),
            is_system=to_bool(_pick(data, "isSystem", "is_system")),
            is_included_in_savings=None if savings is None else to_bool(savings),
            budget_limit=None if budget is None else float(budget),
            subcategories=[SubcategoryItem.from_dict(s) for s in data.get("subcategories") or []],
        )


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in data:
            return data[k]
    return None


if TYPE_CHECKING:
    _is_i_category: type[ICategory] = CategoryItem
    _is_i_subcategory: type[ISubcategory] = SubcategoryItem
    _is_IToDict: type[IToDict] = CategoryItem
