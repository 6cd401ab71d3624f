from __future__ import annotations

import copy
from decimal import Decimal

import pytest

from finance_importer.controllers.category_resolver import (
    CategoryResolver,
    default_category_name,
    find_category,
    resolve_category,
    resolve_subcategory,
    suggest_subcategory_name,
)
from finance_importer.data_model import CategoryItem, SubcategoryItem, TransactionType
from finance_importer.utilities import DEFAULT_RULES, SequentialIdGenerator

EXPENSE = TransactionType.EXPENSE
INCOME = TransactionType.INCOME


def _existing():
    return [
        CategoryItem(
            id="cat-food",
            name="Food",
            type=EXPENSE,
            color="#22c55e",
            is_system=True,
            subcategories=[SubcategoryItem("sub-groc", "Groceries"), SubcategoryItem("sub-oth", "Other")],
        ),
        CategoryItem(
            id="cat-fun",
            name="Entertainment",
            subcategories=[SubcategoryItem("sub-str", "Streaming")],
        ),
        CategoryItem(id="cat-empty", name="Gifts", subcategories=[]),
    ]


# --------------------------- default_category_name -----------------------------

@pytest.mark.parametrize(
    "amount,description,expected",
    [
        ("3000.00", "ACME PAYROLL", "Salary"),
        ("0.01", "netflix refund", "Salary"),
        ("-45.50", "Grocery Store", "Food"),
        ("-15.99", "NETFLIX.COM", "Entertainment"),
        ("-9.00", "UBER TRIP #123", "Other"),
        ("-9.00", "Amazon grocery order", "Food"),  # earlier table entry wins
        ("0", "", "Other"),
    ],
)
def test_default_category_name(amount, description, expected):
    """Positive: income goes to Salary; expenses use the first keyword match; otherwise Other."""
    assert default_category_name(Decimal(amount), description, DEFAULT_RULES) == expected


def test_default_category_name_uses_injected_table():
    """Positive: the keyword table is configuration, not code."""
    rules = DEFAULT_RULES.with_overrides(keyword_categories=(("uber", "Transport"),))

    assert default_category_name(Decimal("-9"), "UBER TRIP", rules) == "Transport"
    assert default_category_name(Decimal("-9"), "Grocery", rules) == "Other"


# ------------------------------ resolve_category -------------------------------

def test_resolve_is_idempotent_per_run_and_case_insensitive():
    """Property: the same name (any case) returns the same instance within one run."""
    resolver = CategoryResolver(_existing(), id_generator=SequentialIdGenerator("t"))

    a = resolver.resolve("Travel", EXPENSE)
    b = resolver.resolve("  travel ", EXPENSE)

    assert a is b
    assert len(resolver.deltas()) == 1


def test_existing_category_is_cloned_never_mutated():
    """Positive: touching an existing category works on a clone; the input list is unchanged."""
    # Arrange
    existing = _existing()
    snapshot = copy.deepcopy(existing)
    resolver = CategoryResolver(existing, id_generator=SequentialIdGenerator("t"))

    # Act
    cat, sub = resolver.resolve_pair("food", "Restaurants", EXPENSE)

    # Assert
    assert cat.id == "cat-food"
    assert cat is not existing[0]
    assert [s.name for s in cat.subcategories] == ["Groceries", "Other", "Restaurants"]
    assert sub.name == "Restaurants"
    assert existing == snapshot
    assert len(existing[0].subcategories) == 2


def test_subcategories_accumulate_rather_than_overwrite():
    """Property: repeated rows add to the same materialized category."""
    resolver = CategoryResolver(_existing(), id_generator=SequentialIdGenerator("t"))

    _, s1 = resolver.resolve_pair("Entertainment", "Cinema", EXPENSE)
    _, s2 = resolver.resolve_pair("entertainment", "cinema", EXPENSE)
    cat, s3 = resolver.resolve_pair("Entertainment", "Games", EXPENSE)

    assert s1 is s2
    assert [s.name for s in cat.subcategories] == ["Streaming", "Cinema", "Games"]
    assert s3.id == "t-2"


def test_new_category_gets_defaults_and_other_subcategory():
    """Positive: unknown names synthesize a category with one default subcategory."""
    gen = SequentialIdGenerator("n")

    cat = resolve_category("Pets", EXPENSE, {}, {}, gen, DEFAULT_RULES)

    assert cat.id == "n-1"
    assert cat.name == "Pets"
    assert cat.type is EXPENSE
    assert cat.color == "#64748b"
    assert cat.is_system is False
    assert [(s.id, s.name) for s in cat.subcategories] == [("n-2", "Other")]


def test_blank_names_resolve_to_default_bucket():
    """Edge: blank category and subcategory names fall back to Other."""
    resolver = CategoryResolver([], id_generator=SequentialIdGenerator())

    cat, sub = resolver.resolve_pair("   ", None, EXPENSE)

    assert cat.name == "Other"
    assert sub.name == "Other"
    assert len(cat.subcategories) == 1


def test_resolve_subcategory_appends_missing_default():
    """Positive: an existing category without the requested subcategory gets it appended on the clone."""
    existing = {c.key: c for c in _existing()}
    materialized = {}
    gen = SequentialIdGenerator("s")

    cat = resolve_category("Gifts", INCOME, existing, materialized, gen)
    sub = resolve_subcategory(cat, "", gen)

    assert sub.name == "Other"
    assert cat.subcategories == [sub]
    assert existing["gifts"].subcategories == []
    assert cat.type is EXPENSE  # kept from the existing category


def test_find_category_first_match_wins():
    """Edge: duplicate names in the existing list resolve to the first entry."""
    cats = _existing() + [CategoryItem(id="dup", name="FOOD")]

    assert find_category("food", cats).id == "cat-food"
    assert CategoryResolver(cats).resolve("Food", EXPENSE).id == "cat-food"


# --------------------------- suggest_subcategory_name --------------------------

@pytest.mark.parametrize(
    "category,expected",
    [
        ("Entertainment", "Streaming"),  # exactly one subcategory
        ("food", "Other"),               # has 'Other'
        ("Gifts", ""),                   # none to suggest
        ("Brand New", "Other"),          # will be created with 'Other'
    ],
)
def test_suggest_subcategory_name(category, expected):
    """Positive: suggestion follows the single / Other / none rule."""
    assert suggest_subcategory_name(category, _existing()) == expected
