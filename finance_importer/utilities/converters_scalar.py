# finance_importer/utilities/converters_scalar.py
from __future__ import annotations

import json
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Final, Optional


def _bad(value: Any, target: str) -> ValueError:
    return ValueError(f"Cannot convert {type(value).__name__} to {target}")


def to_decimal(value: Any, decimal_char: str = "") -> Decimal:
    """
    Convert various inputs to Decimal with lenient, locale-aware-ish parsing.

    Supported string formats:
      - "1234", "-1234", "1234-", "(1,234.56)", "-3,188.32"
      - "1,234.56" (US) and "1.234,56" (EU): auto-detects decimal vs thousands
      - Currency symbols/words ignored: "$1,234.56", "1 234,56 zł", "EUR 1.234,56"

    Parameters
    ----------
    value : Any
        Decimal, int, float or str.
    decimal_char : str, optional
        "" to auto-detect the decimal mark, or "." / "," to force it.

    Raises
    ------
    ValueError
        If no digits are present or the cleaned value is invalid.

    Examples
    --------
        to_decimal("-3,188.32")        -> Decimal('-3188.32')
        to_decimal("1.234,56")         -> Decimal('1234.56')
        to_decimal("(1,234.56)")       -> Decimal('-1234.56')
        to_decimal("45,50", ",")       -> Decimal('45.50')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise _bad(value, "Decimal")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise _bad(value, "Decimal")
        # Avoid binary float artifacts
        return Decimal(str(value))

    if not isinstance(value, str):
        raise ValueError(
            f"Unsupported type for Decimal conversion: {type(value).__name__}"
        )

    cleaned = clean_number_like_string(value, decimal_char)

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(
            f"Could not parse Decimal from {value!r} (normalized to {cleaned!r})"
        ) from e


def clean_number_like_string(value: str, decimal_char: str = "") -> str:
    """
    Normalize a human-formatted number into a string ``Decimal`` accepts.

    Rules for decimal/thousands detection when ``decimal_char`` is empty:
      * If both ',' and '.' appear: the *last* separator is the decimal mark;
        the other is thousands and removed.
      * If only one of ',' or '.' appears:
          - 1–2 digits after it: decimal mark.
          - exactly 3 digits after it: thousands mark.
          - otherwise: thousands mark.
    """
    s = value.strip()
    if not s:
        raise ValueError("Empty string cannot be converted to Decimal")

    # Normalize common oddities
    s = s.replace("\xa0", " ").replace(_UNICODE_MINUS, "-")  # NBSP, unicode minus
    s = s.strip()

    # Detect negative via parentheses or trailing minus
    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg = True
        s = s[1:-1].strip()
    if s.endswith("-"):
        neg = not neg
        s = s[:-1].strip()

    # Remove currency symbols/letters/spaces: keep [digits , . -]
    s = _NON_DIGIT_KEEP_SEP.sub("", s)

    if s.startswith("+"):
        s = s[1:]
    if s.startswith("-"):
        neg = not neg
        s = s[1:]

    digits = re.sub(r"[^\d]", "", s)
    if not digits:
        raise ValueError(f"No digits found in input: {value!r}")

    has_comma = "," in s
    has_dot = "." in s

    def _apply_decimal_sep(txt: str, decimal_sep: Optional[str]) -> str:
        if decimal_sep is None:
            return txt.replace(",", "").replace(".", "")
        if decimal_sep == ".":
            return txt.replace(",", "")
        return txt.replace(".", "").replace(",", ".")

    if decimal_char != "":
        if decimal_char not in (".", ","):
            raise ValueError(f"Invalid decimal_char: {decimal_char!r}")
        cleaned = _apply_decimal_sep(s, decimal_char)
    elif has_comma and has_dot:
        dec_sep = "," if s.rfind(",") > s.rfind(".") else "."
        cleaned = _apply_decimal_sep(s, dec_sep)
    elif has_comma or has_dot:
        ch = "," if has_comma else "."
        after = len(s) - s.rfind(ch) - 1
        dec_sep = ch if after in (1, 2) else None
        cleaned = _apply_decimal_sep(s, dec_sep)
    else:
        cleaned = s

    cleaned = cleaned.replace("-", "").strip()
    if neg and cleaned:
        cleaned = "-" + cleaned
    return cleaned


def parse_amount(cell: str, decimal_char: str = "") -> Decimal:
    """Parse a bank amount cell; cells without any digits count as zero."""
    try:
        return to_decimal(cell, decimal_char)
    except ValueError:
        return Decimal("0")


def to_js_string(value: Any) -> str:
    """
    Render a decoded JSON value the way a browser's ``String(value)`` would,
    so flattened JSON rows look like CSV cells.

    ``None`` becomes "", booleans become "true"/"false", integral floats drop
    their ".0", nested objects and arrays are re-encoded as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip().lower() in _TRUE_STRINGS
    if isinstance(v, (int, float, Decimal)):
        return bool(v)
    raise _bad(v, "bool")


_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}
_NON_DIGIT_KEEP_SEP: Final[re.Pattern[str]] = re.compile(r"[^\d,.\-\(\)+]+")
_UNICODE_MINUS = "\u2212"  # '−'
