# finance_importer/utilities/import_rules.py
"""
Static configuration data for the import pipeline.

The keyword → category table, the noise-prefix list used by pattern grouping and
the default category names live here as data so the resolver and grouper stay
agnostic of any particular bank or language. ``DEFAULT_RULES`` is used when no
rules file is supplied; ``load_import_rules`` reads overrides from JSON.

JSON shape (every key optional)::

    {
      "keyword_categories": {"netflix": "Entertainment", "lidl": "Food"},
      "noise_prefixes": ["payment", "card"],
      "category_header_synonyms": ["category", "type"],
      "currency_markers": ["$", "EUR"],
      "default_category_name": "Other",
      "default_subcategory_name": "Other",
      "salary_category_name": "Salary",
      "placeholder_description": "No description",
      "new_category_color": "#64748b"
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple

from .core_util import open_for_read

_KEYWORD_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    # Food
    ("grocery", "Food"), ("supermarket", "Food"), ("walmart", "Food"),
    ("tesco", "Food"), ("aldi", "Food"), ("lidl", "Food"), ("kroger", "Food"),
    ("biedronka", "Food"), ("zabka", "Food"), ("żabka", "Food"),
    ("uber eats", "Food"), ("restaurant", "Food"), ("mcdonald", "Food"),
    ("starbucks", "Food"), ("doordash", "Food"),
    # Shopping
    ("amazon", "Shopping"), ("allegro", "Shopping"), ("ebay", "Shopping"),
    ("zara", "Shopping"), ("h&m", "Shopping"), ("decathlon", "Shopping"),
    ("ikea", "Housing"),
    # Transport
    ("shell", "Transport"), ("orlen", "Transport"), ("chevron", "Transport"),
    ("bp ", "Transport"), ("parking", "Transport"), ("lyft", "Transport"),
    ("bolt", "Transport"), ("railway", "Transport"),
    # Bills
    ("electric", "Bills"), ("internet", "Bills"), ("verizon", "Bills"),
    ("comcast", "Bills"), ("utility", "Bills"),
    # Entertainment
    ("netflix", "Entertainment"), ("spotify", "Entertainment"),
    ("steam", "Entertainment"), ("cinema", "Entertainment"),
    # Health
    ("pharmacy", "Health"), ("walgreens", "Health"), ("apteka", "Health"),
    # Loans
    ("mortgage", "Loan"), ("loan installment", "Loan"),
    # Savings
    ("own transfer", "Internal Transfer"), ("deposit account", "Savings"),
)

_NOISE_PREFIXES: Tuple[str, ...] = (
    # English bank statement boilerplate
    "payment", "card", "purchase", "transaction", "transfer", "pos", "terminal",
    "debit", "credit", "visa", "mastercard", "contactless", "ref", "reference",
    "no", "nr", "number", "invoice", "fee", "withdrawal", "atm", "order",
    # Polish bank statement boilerplate
    "platnosc", "płatność", "transakcja", "karta", "kartą", "zakup",
    "przelew", "rezerwacja", "oplata", "opłata", "wyplata", "wypłata",
    "obciazenie", "obciążenie", "blokada", "sprzedaż", "zlec", "zlecenie",
    "tytul", "tytułem", "numer", "rachunek", "faktura", "vat",
)


@dataclass(frozen=True)
class ImportRules:
    """Locale/bank specific knobs consumed by the classifier, resolver and grouper."""

    keyword_categories: Tuple[Tuple[str, str], ...] = _KEYWORD_CATEGORIES
    noise_prefixes: Tuple[str, ...] = _NOISE_PREFIXES
    category_header_synonyms: Tuple[str, ...] = ("category", "kategoria", "type", "typ")
    currency_markers: Tuple[str, ...] = ("$", "€", "£", "USD", "EUR", "GBP", "PLN", "zł")
    default_category_name: str = "Other"
    default_subcategory_name: str = "Other"
    salary_category_name: str = "Salary"
    placeholder_description: str = "No description"
    new_category_color: str = "#64748b"

    def with_overrides(self, **changes: Any) -> "ImportRules":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["ImportRules"] = None) -> "ImportRules":
        """
        Build rules from a JSON-style mapping, falling back to ``base`` (or the
        defaults) for missing keys. Unknown keys raise ``ValueError``.
        """
        base = base or DEFAULT_RULES
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown import rule keys: {unknown}")

        changes: dict[str, Any] = {}
        for key, value in data.items():
            if key == "keyword_categories":
                changes[key] = _keyword_pairs(value)
            elif key in ("noise_prefixes", "category_header_synonyms", "currency_markers"):
                if isinstance(value, str) or not isinstance(value, Iterable):
                    raise ValueError(f"{key} must be a list of strings")
                items = tuple(str(v) for v in value)
                changes[key] = items if key == "currency_markers" else tuple(v.lower() for v in items)
            else:
                changes[key] = str(value)
        return replace(base, **changes)


def _keyword_pairs(value: Any) -> Tuple[Tuple[str, str], ...]:
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, Iterable) and not isinstance(value, str):
        items = value
    else:
        raise ValueError("keyword_categories must be an object or a list of pairs")
    out = []
    for item in items:
        keyword, category = item
        out.append((str(keyword).lower(), str(category)))
    return tuple(out)


DEFAULT_RULES = ImportRules()


def load_import_rules(path: Path, encoding: str = "utf-8") -> ImportRules:
    """Read an ``ImportRules`` override file (JSON object)."""
    with open_for_read(Path(path), binary=False, encoding=encoding) as f:
        data = json.load(f)
    if not isinstance(data, Mapping):
        raise ValueError(f"Import rules file must contain a JSON object: {path}")
    return ImportRules.from_dict(data)
