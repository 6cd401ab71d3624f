# finance_importer/controllers/row_parser.py
"""
Apply a confirmed column mapping to raw rows.

Each data row becomes a ``ParsedCandidate``; its date is then tried under the
primary ``DateFormat`` and the candidate lands in exactly one bucket:

* valid   -> ``ValidItem`` (ISO date, absolute amount, derived type, category name)
* failed  -> ``FailedRow`` (kept for the single correction retry)
* blank   -> neither; zero amount and no date is a separator line
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from finance_importer.data_model import (
    ColumnRole,
    DateFormat,
    FailedRow,
    ParsedCandidate,
    TransactionType,
    ValidItem,
)
from finance_importer.utilities import (
    DEFAULT_RULES,
    IdGenerator,
    ImportRules,
    is_null_or_whitespace,
    parse_amount,
    uuid_id_generator,
)

from .category_resolver import default_category_name
from .date_interpreter import parse_strict

log = logging.getLogger(__name__)


def build_candidate(
    row: Sequence[str],
    mapping: Dict[int, ColumnRole],
    *,
    decimal_char: str = "",
    row_index: int = -1,
    rules: ImportRules = DEFAULT_RULES,
) -> ParsedCandidate:
    """Read the mapped cells of one row; blank cells leave the field at its default."""
    date_str = ""
    amount = parse_amount("", decimal_char)
    description = rules.placeholder_description
    category = ""

    for col, role in sorted(mapping.items()):
        if col >= len(row):
            continue
        val = row[col]
        if is_null_or_whitespace(val):
            continue
        if role == ColumnRole.DATE:
            date_str = val.strip()
        elif role == ColumnRole.AMOUNT:
            amount = parse_amount(val, decimal_char)
        elif role == ColumnRole.DESCRIPTION:
            description = val.strip()
        elif role == ColumnRole.CATEGORY:
            category = val.strip()

    return ParsedCandidate(
        date_str=date_str,
        signed_amount=amount,
        description=description,
        category_name_raw=category,
        source_row=tuple(row),
        row_index=row_index,
    )


def to_valid_item(
    candidate: ParsedCandidate,
    iso_date: str,
    id_generator: IdGenerator,
    rules: ImportRules = DEFAULT_RULES,
) -> ValidItem:
    """Promote a candidate whose date parsed to ``iso_date``."""
    if candidate.has_explicit_category:
        category = candidate.category_name_raw
    else:
        category = default_category_name(candidate.signed_amount, candidate.description, rules)
    return ValidItem(
        id=id_generator(),
        date=iso_date,
        amount=abs(candidate.signed_amount),
        description=candidate.description,
        type=TransactionType.from_amount(candidate.signed_amount),
        category_name=category,
        candidate=candidate,
    )


def parse_rows(
    rows: Sequence[Sequence[str]],
    mapping: Dict[int, ColumnRole],
    fmt: DateFormat,
    *,
    has_header: bool = True,
    decimal_char: str = "",
    rules: ImportRules = DEFAULT_RULES,
    id_generator: Optional[IdGenerator] = None,
) -> Tuple[List[ValidItem], List[FailedRow]]:
    """Partition every data row into valid items and failed rows.

    Parameters
    ----------
    rows : Sequence[Sequence[str]]
        Raw table from the ingestor.
    mapping : Dict[int, ColumnRole]
        Confirmed column roles.
    fmt : DateFormat
        Primary date format.
    has_header : bool
        Skip ``rows[0]``.
    decimal_char : str
        ``""`` to auto-detect, or ``"."`` / ``","``.
    rules : ImportRules
        Default names and keyword table.
    id_generator : IdGenerator, optional
        Supplies ``ValidItem.id``; random UUIDs by default.

    Returns
    -------
    tuple[list[ValidItem], list[FailedRow]]
        Blank rows appear in neither list.
    """
    gen = id_generator or uuid_id_generator
    valid: List[ValidItem] = []
    failed: List[FailedRow] = []
    blank = 0
    start = 1 if has_header else 0

    for i in range(start, len(rows)):
        candidate = build_candidate(
            rows[i], mapping, decimal_char=decimal_char, row_index=i, rules=rules
        )
        if candidate.is_blank:
            blank += 1
            continue
        iso = parse_strict(candidate.date_str, fmt)
        if iso is None:
            failed.append(FailedRow(candidate=candidate, attempted_format=fmt))
        else:
            valid.append(to_valid_item(candidate, iso, gen, rules))

    log.info(
        "Parsed %d rows under %s: %d valid, %d failed, %d blank",
        max(len(rows) - start, 0),
        fmt.value,
        len(valid),
        len(failed),
        blank,
    )
    return valid, failed


def revalidate(
    failed: Sequence[FailedRow],
    fmt: DateFormat,
    *,
    rules: ImportRules = DEFAULT_RULES,
    id_generator: Optional[IdGenerator] = None,
) -> Tuple[List[ValidItem], List[FailedRow]]:
    """
    Retry failed rows under a secondary format.

    Returns ``(recovered, still_failing)``. The caller drops ``still_failing``;
    there is no further retry.
    """
    gen = id_generator or uuid_id_generator
    recovered: List[ValidItem] = []
    still: List[FailedRow] = []
    for row in failed:
        iso = parse_strict(row.date_str, fmt)
        if iso is None:
            still.append(FailedRow(candidate=row.candidate, attempted_format=fmt))
        else:
            recovered.append(to_valid_item(row.candidate, iso, gen, rules))
    return recovered, still
