# finance_importer/controllers/category_resolver.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finance_importer.data_model import CategoryItem, SubcategoryItem, TransactionType
from finance_importer.utilities import (
    DEFAULT_RULES,
    IdGenerator,
    ImportRules,
    normalize_key,
    uuid_id_generator,
)

log = logging.getLogger(__name__)


def default_category_name(
    signed_amount: Decimal, description: str, rules: ImportRules = DEFAULT_RULES
) -> str:
    """
    Category name for a row that supplied none.

    Positive amounts are income and go to the salary-like category. Expenses are
    matched against the ordered keyword table (first substring hit wins, case
    insensitive); anything unmatched falls back to the default bucket.
    """
    if signed_amount > 0:
        return rules.salary_category_name
    lower = (description or "").lower()
    for keyword, category in rules.keyword_categories:
        if keyword.lower() in lower:
            return category
    return rules.default_category_name


def _index_by_key(categories: Iterable[CategoryItem]) -> Dict[str, CategoryItem]:
    out: Dict[str, CategoryItem] = {}
    for c in categories:
        out.setdefault(c.key, c)
    return out


def find_category(name: str, categories: Iterable[CategoryItem]) -> Optional[CategoryItem]:
    """Case-insensitive lookup; the first category carrying the name wins."""
    wanted = normalize_key(name)
    for c in categories:
        if c.key == wanted:
            return c
    return None


def suggest_subcategory_name(
    category_name: str,
    existing: Sequence[CategoryItem],
    rules: ImportRules = DEFAULT_RULES,
) -> str:
    """
    Subcategory to pre-select when the operator re-targets a group.

    The only subcategory if the category has exactly one, the default one if it
    exists, otherwise ``""`` (finalization then falls back to the default).
    """
    cat = find_category(category_name, existing)
    if cat is None:
        return rules.default_subcategory_name
    if len(cat.subcategories) == 1:
        return cat.subcategories[0].name
    if cat.find_subcategory(rules.default_subcategory_name) is not None:
        return rules.default_subcategory_name
    return ""


def resolve_category(
    raw_name: str,
    txn_type: TransactionType,
    existing: Dict[str, CategoryItem],
    materialized: Dict[str, CategoryItem],
    id_generator: IdGenerator = uuid_id_generator,
    rules: ImportRules = DEFAULT_RULES,
) -> CategoryItem:
    """Look up or create the category for ``raw_name`` within this run.

    Parameters
    ----------
    raw_name : str
        Name as written in the row (blank means the default bucket).
    txn_type : TransactionType
        Type given to a newly synthesized category.
    existing : Dict[str, CategoryItem]
        Pre-existing categories keyed by ``normalize_key(name)``. Never mutated.
    materialized : Dict[str, CategoryItem]
        Categories touched in this run, same keying. Updated in place.
    id_generator : IdGenerator
        Id source for new categories and their default subcategory.
    rules : ImportRules
        Default names and the colour for new categories.

    Returns
    -------
    CategoryItem
        The instance held in ``materialized``; repeated calls with the same
        name return the same object.
    """
    name = raw_name.strip() if raw_name and raw_name.strip() else rules.default_category_name
    key = normalize_key(name)

    cat = materialized.get(key)
    if cat is not None:
        return cat

    source = existing.get(key)
    if source is not None:
        cat = source.clone()
        log.debug("Cloned existing category %r (%s)", cat.name, cat.id)
    else:
        cat = CategoryItem(
            id=id_generator(),
            name=name,
            type=txn_type,
            color=rules.new_category_color,
            is_system=False,
            subcategories=[
                SubcategoryItem(id=id_generator(), name=rules.default_subcategory_name)
            ],
        )
        log.info("Creating category %r (%s)", cat.name, cat.type.value)
    materialized[key] = cat
    return cat


def resolve_subcategory(
    category: CategoryItem,
    raw_name: Optional[str],
    id_generator: IdGenerator = uuid_id_generator,
    rules: ImportRules = DEFAULT_RULES,
) -> SubcategoryItem:
    """
    Look up ``raw_name`` in ``category.subcategories``, appending it if absent.

    ``category`` must be a materialized (owned) instance, never a pre-existing one.
    """
    name = raw_name.strip() if raw_name and raw_name.strip() else rules.default_subcategory_name
    sub = category.find_subcategory(name)
    if sub is None:
        sub = SubcategoryItem(id=id_generator(), name=name)
        category.subcategories.append(sub)
        log.debug("Adding subcategory %r to %r", name, category.name)
    return sub


class CategoryResolver:
    """
    Copy-on-write view over the existing taxonomy for one import run.

    Existing categories are read through ``existing`` and cloned into the
    ``materialized`` map on first touch; only clones and new categories are ever
    modified. ``deltas()`` lists every touched category in first-touch order.
    """

    def __init__(
        self,
        existing: Iterable[CategoryItem],
        *,
        id_generator: Optional[IdGenerator] = None,
        rules: ImportRules = DEFAULT_RULES,
    ) -> None:
        self._existing = _index_by_key(existing)
        self._materialized: Dict[str, CategoryItem] = {}
        self._id_generator = id_generator or uuid_id_generator
        self.rules = rules

    def resolve(self, raw_name: str, txn_type: TransactionType) -> CategoryItem:
        return resolve_category(
            raw_name,
            txn_type,
            self._existing,
            self._materialized,
            self._id_generator,
            self.rules,
        )

    def resolve_pair(
        self, category_name: str, subcategory_name: Optional[str], txn_type: TransactionType
    ) -> Tuple[CategoryItem, SubcategoryItem]:
        cat = self.resolve(category_name, txn_type)
        sub = resolve_subcategory(cat, subcategory_name, self._id_generator, self.rules)
        return cat, sub

    def deltas(self) -> List[CategoryItem]:
        return list(self._materialized.values())

    def __len__(self) -> int:
        return len(self._materialized)
