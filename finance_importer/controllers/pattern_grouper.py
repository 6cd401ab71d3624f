# finance_importer/controllers/pattern_grouper.py
"""
Detect clusters of similarly described, uncategorized expenses.

"CARD PAYMENT 1234 UBER TRIP #88" and "card payment uber trip #91" share the
signature ``"uber trip"``: punctuation becomes whitespace, leading noise words
and numbers are skipped, and the next two tokens form the key.
"""
from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from finance_importer.data_model import GroupedTransaction, TransactionType, ValidItem
from finance_importer.utilities import DEFAULT_RULES, ImportRules, normalize_key

log = logging.getLogger(__name__)

_PUNCT = re.compile(r"[^\w\s]")
_NUMERIC = re.compile(r"^\d+$")
_SIGNATURE_TOKENS = 2
_MIN_SIGNATURE_LEN = 3


def signature_of(description: str, rules: ImportRules = DEFAULT_RULES) -> Optional[str]:
    """Grouping key of ``description``, or None when it is too short to group on."""
    clean = _PUNCT.sub(" ", (description or "").lower())
    tokens = clean.split()
    noise = set(rules.noise_prefixes)
    start = 0
    while start < len(tokens) and (tokens[start] in noise or _NUMERIC.match(tokens[start])):
        start += 1
    sig = " ".join(tokens[start : start + _SIGNATURE_TOKENS])
    if len(sig) < _MIN_SIGNATURE_LEN:
        return None
    return sig


def _is_candidate(item: ValidItem, rules: ImportRules) -> bool:
    if item.type != TransactionType.EXPENSE:
        return False
    cat = normalize_key(item.category_name)
    if cat and cat != normalize_key(rules.default_category_name):
        return False
    return bool(item.description) and item.description != rules.placeholder_description


def detect(
    items: Sequence[ValidItem], rules: ImportRules = DEFAULT_RULES
) -> List[GroupedTransaction]:
    """
    Group uncategorized expenses by description signature.

    Only groups with more than one member are returned, largest first; groups
    of equal size keep first-seen order.
    """
    groups: Dict[str, GroupedTransaction] = {}
    for item in items:
        if not _is_candidate(item, rules):
            continue
        sig = signature_of(item.description, rules)
        if sig is None:
            continue
        group = groups.get(sig)
        if group is None:
            group = GroupedTransaction(
                signature=sig,
                example_description=item.description,
                proposed_category_name=rules.default_category_name,
                proposed_subcategory_name=rules.default_subcategory_name,
            )
            groups[sig] = group
        group.member_ids.append(item.id)

    result = [g for g in groups.values() if g.count > 1]
    result.sort(key=lambda g: g.count, reverse=True)
    log.debug("Detected %d groups among %d items", len(result), len(items))
    return result


def apply_groups(
    items: Sequence[ValidItem], groups: Sequence[GroupedTransaction]
) -> List[ValidItem]:
    """
    Return ``items`` with enabled groups' category choices applied.

    Members of disabled groups, and items outside every group, keep their own
    category and subcategory.
    """
    chosen: Dict[str, GroupedTransaction] = {}
    for g in groups:
        if not g.enabled:
            continue
        for member in g.member_ids:
            chosen.setdefault(member, g)

    out: List[ValidItem] = []
    for item in items:
        g = chosen.get(item.id)
        if g is None:
            out.append(item)
        else:
            out.append(
                replace(
                    item,
                    category_name=g.proposed_category_name,
                    subcategory_name=g.proposed_subcategory_name or None,
                )
            )
    return out
