# finance_importer/controllers/column_classifier.py
"""
Heuristic column-role suggestion for an unknown bank export.

The result is only a default: the operator may override any column before the
rows are parsed, and classification never blocks the pipeline.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence

from finance_importer.data_model import ColumnRole
from finance_importer.utilities import DEFAULT_RULES, ImportRules

log = logging.getLogger(__name__)

ColumnMapping = Dict[int, ColumnRole]

_SAMPLE_SIZE = 5
_MAX_AMOUNT_LEN = 20

_DATE_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DATE_DMY = re.compile(r"^\d{2}[.-]\d{2}[.-]\d{4}")
_NATURAL_NUMBER = re.compile(r"^\d+$")
_AMOUNT_SHAPE = re.compile(r"^-?\d+[.,\s]?\d*[.,]?\d*$")


def is_date_like(val: str) -> bool:
    return bool(_DATE_ISO.match(val) or _DATE_DMY.match(val))


def is_natural_number(val: str) -> bool:
    return bool(_NATURAL_NUMBER.match(val))


def is_amount_like(val: str, rules: ImportRules = DEFAULT_RULES) -> bool:
    if len(val) >= _MAX_AMOUNT_LEN:
        return False
    return bool(_AMOUNT_SHAPE.match(val)) or any(m in val for m in rules.currency_markers)


def _is_category_header(header: Optional[str], rules: ImportRules) -> bool:
    if not header:
        return False
    h = header.lower()
    return any(k in h for k in rules.category_header_synonyms)


def table_width(rows: Sequence[Sequence[str]]) -> int:
    return max((len(r) for r in rows), default=0)


def representative_cells(
    rows: Sequence[Sequence[str]], has_header: bool = True, sample_size: int = _SAMPLE_SIZE
) -> List[str]:
    """
    First non-blank cell per column among the sampled data rows (``""`` if the
    column is blank throughout the sample).
    """
    start = 1 if has_header and len(rows) > 1 else 0
    sample = rows[start : start + sample_size]
    width = table_width(rows[: start + sample_size])
    cells: List[str] = []
    for col in range(width):
        value = ""
        for row in sample:
            cell = row[col].strip() if col < len(row) and row[col] else ""
            if cell:
                value = cell
                break
        cells.append(value)
    return cells


def classify(
    rows: Sequence[Sequence[str]],
    has_header: bool = True,
    *,
    sample_size: int = _SAMPLE_SIZE,
    rules: ImportRules = DEFAULT_RULES,
) -> ColumnMapping:
    """Suggest a role for every column of ``rows``.

    Parameters
    ----------
    rows : Sequence[Sequence[str]]
        Raw table, header first when ``has_header`` is set.
    has_header : bool
        Whether ``rows[0]`` holds column titles.
    sample_size : int
        Number of data rows inspected.
    rules : ImportRules
        Supplies the category-header synonyms and currency markers.

    Returns
    -------
    Dict[int, ColumnRole]
        One entry for every column index of ``rows``, including columns that only
        appear after the sample; unassigned columns are ``ColumnRole.SKIP``.

    Notes
    -----
    Per column, in priority order: date-shaped → DATE; pure digits → SKIP (an
    id column); short numeric/currency text → AMOUNT; header mentions a category
    synonym → CATEGORY. Among the remaining columns the single longest cell
    becomes DESCRIPTION.
    """
    if not rows:
        return {}
    header = rows[0] if has_header else None
    cells = representative_cells(rows, has_header, sample_size)

    mapping: ColumnMapping = {}
    max_len = 0
    desc_index = -1

    for index, val in enumerate(cells):
        if is_date_like(val):
            mapping[index] = ColumnRole.DATE
            continue
        if is_natural_number(val):
            mapping[index] = ColumnRole.SKIP
            continue
        if is_amount_like(val, rules):
            mapping[index] = ColumnRole.AMOUNT
            continue
        header_cell = header[index] if header is not None and index < len(header) else None
        if _is_category_header(header_cell, rules):
            mapping[index] = ColumnRole.CATEGORY
            continue
        if len(val) > max_len:
            max_len = len(val)
            desc_index = index

    if desc_index != -1:
        mapping[desc_index] = ColumnRole.DESCRIPTION
    for index in range(table_width(rows)):
        mapping.setdefault(index, ColumnRole.SKIP)

    log.debug("Suggested column roles: %s", {i: r.value for i, r in sorted(mapping.items())})
    return dict(sorted(mapping.items()))


def complete_mapping(mapping: Dict[int, ColumnRole], width: int) -> ColumnMapping:
    """Fill any gap in ``mapping`` up to ``width`` with SKIP."""
    out = {i: mapping.get(i, ColumnRole.SKIP) for i in range(width)}
    for i, role in mapping.items():
        out.setdefault(i, role)
    return dict(sorted(out.items()))


def find_column(mapping: Dict[int, ColumnRole], role: ColumnRole) -> Optional[int]:
    """Lowest column index assigned ``role``, or None."""
    for index, r in sorted(mapping.items()):
        if r == role:
            return index
    return None

