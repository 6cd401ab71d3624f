from __future__ import annotations

from decimal import Decimal

import pytest

from finance_importer.data_model import (
    BackupData,
    CategoryItem,
    ICategory,
    ITransaction,
    IToDict,
    ParsedCandidate,
    SubcategoryItem,
    Transaction,
    TransactionType,
)


# ------------------------------- TransactionType -------------------------------

@pytest.mark.parametrize(
    "amount,expected",
    [(Decimal("0.01"), TransactionType.INCOME), (Decimal("0"), TransactionType.EXPENSE),
     (Decimal("-3"), TransactionType.EXPENSE)],
)
def test_transaction_type_from_amount(amount, expected):
    """Positive: only strictly positive amounts are income."""
    assert TransactionType.from_amount(amount) is expected


# -------------------------------- CategoryItem ---------------------------------

def test_category_to_dict_uses_tracker_keys_and_omits_unset_optionals():
    """Positive: camelCase keys; optional fields appear only when set."""
    c = CategoryItem(id="c1", name="Food", subcategories=[SubcategoryItem("s1", "Other")])

    d = c.to_dict()

    assert d == {
        "id": "c1",
        "name": "Food",
        "type": "EXPENSE",
        "color": "#64748b",
        "isSystem": False,
        "subcategories": [{"id": "s1", "name": "Other"}],
    }
    c.budget_limit = 250.0
    c.is_included_in_savings = True
    assert c.to_dict()["budgetLimit"] == 250.0
    assert c.to_dict()["isIncludedInSavings"] is True


def test_category_from_dict_accepts_snake_case_and_lowercase_type():
    """Edge: snake_case keys and lower-case enum values are tolerated."""
    c = CategoryItem.from_dict(
        {"id": "c2", "name": "Salary", "type": "income", "is_system": "yes", "budget_limit": "100"}
    )

    assert c.type is TransactionType.INCOME
    assert c.is_system is True
    assert c.budget_limit == 100.0
    assert c.subcategories == []


def test_category_clone_has_independent_subcategory_list():
    """Positive: appending to a clone leaves the source category untouched."""
    c = CategoryItem(id="c1", name="Food", subcategories=[SubcategoryItem("s1", "Other")])

    k = c.clone()
    k.subcategories.append(SubcategoryItem("s2", "Snacks"))

    assert k is not c and k.id == c.id
    assert len(c.subcategories) == 1
    assert c.find_subcategory(" OTHER ").id == "s1"
    assert c.find_subcategory("snacks") is None


# -------------------------------- Transaction ----------------------------------

def test_transaction_to_dict_shape():
    """Positive: emitted transactions follow the tracker's record shape."""
    t = Transaction(
        id="t1",
        date="2024-01-20T11:00:00.000Z",
        amount=Decimal("45.50"),
        description="Grocery Store",
        type=TransactionType.EXPENSE,
        category_id="c1",
        subcategory_id="s1",
    )

    assert t.to_dict() == {
        "id": "t1",
        "date": "2024-01-20T11:00:00.000Z",
        "amount": 45.5,
        "description": "Grocery Store",
        "type": "EXPENSE",
        "categoryId": "c1",
        "subcategoryId": "s1",
    }


def test_transaction_from_dict_keeps_amount_non_negative():
    """Positive: stored amounts are absolute; direction lives in the type."""
    t = Transaction.from_dict(
        {"id": "t", "date": "d", "amount": -12.5, "description": "x", "type": "EXPENSE",
         "categoryId": "c", "subcategoryId": "", "tags": ["a"], "isRecurring": True}
    )

    assert t.amount == Decimal("12.5")
    assert t.subcategory_id is None
    assert t.tags == ["a"]
    assert t.is_recurring is True


def test_transaction_signature_ignores_trailing_zeros():
    """Positive: 10, 10.0 and 10.00 share one duplicate-detection key."""
    a = Transaction("a", "d", Decimal("10"), "x", TransactionType.EXPENSE, "c")
    b = Transaction("b", "d", Decimal("10.00"), "x", TransactionType.EXPENSE, "c")

    assert a.signature == b.signature == "d-10-x"


def test_models_satisfy_protocols():
    """Positive: runtime-checkable protocols recognise the concrete models."""
    c = CategoryItem(id="c", name="n")
    t = Transaction("a", "d", Decimal("1"), "x", TransactionType.EXPENSE, "c")

    assert isinstance(c, ICategory) and isinstance(c, IToDict)
    assert isinstance(t, ITransaction) and isinstance(t, IToDict)


# --------------------------------- BackupData ----------------------------------

def test_backup_round_trip_keeps_unknown_keys():
    """Positive: extra top-level keys survive from_dict/to_dict."""
    raw = {
        "version": 2,
        "timestamp": "2024-01-01T00:00:00Z",
        "categories": [{"id": "c", "name": "Food"}],
        "transactions": [],
        "recurringTransactions": [{"id": "r"}],
        "settings": {"k": 1},
        "tags": ["x"],
    }

    b = BackupData.from_dict(raw)
    out = b.to_dict()

    assert b.version == 2
    assert b.extra == {"tags": ["x"]}
    assert out["tags"] == ["x"]
    assert out["timestamp"] == "2024-01-01T00:00:00Z"
    assert out["recurringTransactions"] == [{"id": "r"}]


@pytest.mark.parametrize(
    "raw",
    [
        {"categories": []},
        {"categories": "x", "transactions": []},
        {"categories": [{"id": "c", "type": "BOGUS"}], "transactions": []},
        {"categories": [], "transactions": [{"amount": "abc"}]},
    ],
)
def test_backup_from_dict_rejects_bad_payloads(raw):
    """Negative: malformed backups raise ValueError."""
    with pytest.raises(ValueError):
        BackupData.from_dict(raw)


# ------------------------------- ParsedCandidate -------------------------------

def test_parsed_candidate_blank_rule():
    """Edge: only zero amount together with an empty date is a blank line."""
    def mk(date_str, amount):
        return ParsedCandidate(date_str, Decimal(amount), "d", "", ())

    assert mk("", "0").is_blank
    assert not mk("2024-01-01", "0").is_blank
    assert not mk("", "-1").is_blank
