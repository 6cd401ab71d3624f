from __future__ import annotations

import pytest

from finance_importer.controllers.column_classifier import (
    classify,
    complete_mapping,
    find_column,
    is_amount_like,
    representative_cells,
)
from finance_importer.data_model import ColumnRole
from finance_importer.utilities import DEFAULT_RULES

D, A, DESC, C, S = (
    ColumnRole.DATE,
    ColumnRole.AMOUNT,
    ColumnRole.DESCRIPTION,
    ColumnRole.CATEGORY,
    ColumnRole.SKIP,
)


def test_header_date_desc_amount():
    """Positive: Date/Desc/Amount columns are recognised from the first data row."""
    rows = [
        ["Date", "Desc", "Amount"],
        ["2024-01-15", "Salary", "3000.00"],
        ["2024-01-20", "Grocery Store", "-45.50"],
    ]

    assert classify(rows) == {0: D, 1: DESC, 2: A}


def test_id_column_is_skipped_and_category_header_is_detected():
    """Positive: pure digits mean an id column; a 'Kategoria' header marks the category column."""
    rows = [
        ["Id", "Data", "Opis", "Kwota", "Kategoria"],
        ["1001", "15.01.2024", "Zakup kartą BIEDRONKA", "-12,50", "Jedzenie"],
    ]

    assert classify(rows) == {0: S, 1: D, 2: DESC, 3: A, 4: C}


def test_only_longest_text_column_becomes_description():
    """Positive: among free-text columns only the longest one is the description; others skip."""
    rows = [
        ["date", "memo", "payee", "amount"],
        ["2024-03-01", "ref", "COFFEE HOUSE DOWNTOWN", "-4.20"],
    ]

    mapping = classify(rows)

    assert mapping[2] is DESC
    assert mapping[1] is S


def test_currency_marker_cells_are_amounts():
    """Positive: short cells containing a currency marker are amounts even if not numeric-shaped."""
    assert is_amount_like("-12,50 PLN", DEFAULT_RULES)
    assert is_amount_like("$1,234.56", DEFAULT_RULES)
    assert not is_amount_like("1234567890123456789012 zł", DEFAULT_RULES)


def test_representative_cell_skips_blank_leading_values():
    """Edge: a column blank in the first data row is judged by its first non-blank value."""
    rows = [
        ["Date", "Amount", "Note"],
        ["2024-01-01", "", "first"],
        ["2024-01-02", "-3.00", "second"],
    ]

    assert representative_cells(rows) == ["2024-01-01", "-3.00", "first"]
    assert classify(rows)[1] is A


@pytest.mark.parametrize(
    "rows",
    [
        [["a", "b"], ["x"]],
        [["only"]],
        [["h1", "h2", "h3"], ["", "", ""], ["1", "2"]],
        [["2024-01-01", "-5", "coffee", "extra"]],
    ],
)
def test_mapping_is_total_over_all_columns(rows):
    """Positive: every column index gets a role, with no gaps."""
    width = max(len(r) for r in rows)

    mapping = classify(rows)

    assert sorted(mapping) == list(range(width))
    assert all(isinstance(r, ColumnRole) for r in mapping.values())


def test_columns_beyond_the_sample_are_still_mapped():
    """Edge: a column that first appears after the sampled rows defaults to SKIP."""
    rows = [["a", "b"]] + [["2024-01-01", "x"]] * 6 + [["2024-01-01", "x", "extra"]]

    mapping = classify(rows)

    assert sorted(mapping) == [0, 1, 2]
    assert mapping[0] is D
    assert mapping[2] is ColumnRole.SKIP


def test_no_header_classifies_first_row_as_data():
    """Positive: without a header the first row is the sample."""
    rows = [["2024-01-15", "Salary", "3000.00"]]

    assert classify(rows, has_header=False) == {0: D, 1: DESC, 2: A}


def test_empty_table_gives_empty_mapping():
    """Edge: nothing to classify."""
    assert classify([]) == {}


def test_complete_mapping_fills_to_width_and_find_column():
    """Positive: gaps are filled with SKIP; find_column returns the lowest index with a role."""
    mapping = complete_mapping({1: A}, 3)

    assert mapping == {0: S, 1: A, 2: S}
    assert find_column(mapping, A) == 1
    assert find_column(mapping, D) is None
