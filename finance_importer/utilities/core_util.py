#!/usr/bin/env python3
"""
Core Utilities

Features:
- File I/O helpers
- String utilities
- Pluggable identifier generation
"""

from __future__ import annotations

import itertools
import uuid
from pathlib import Path
from typing import IO, Any, Callable, Literal, Optional, overload

# region Common functions


def is_null_or_whitespace(s: Optional[str]) -> bool:
    """Check if a string is None, empty, or consists only of whitespace."""
    return s is None or s.strip() == ""


def normalize_key(name: Optional[str]) -> str:
    """Case-insensitive identity key used for category and subcategory lookups."""
    return (name or "").strip().lower()


@overload
def open_for_read(path: Path, binary: Literal[True], **kwargs: Any) -> IO[bytes]: ...
@overload
def open_for_read(path: Path, binary: Literal[False], **kwargs: Any) -> IO[str]: ...


def open_for_read(path: Path, binary: bool = False, **kwargs: Any) -> IO[Any]:
    mode = "rb" if binary else "r"
    return open(path, mode, **kwargs)


# endregion Common functions

# region Identifier generation

IdGenerator = Callable[[], str]


def uuid_id_generator() -> str:
    """Default generator: random UUID4 strings."""
    return str(uuid.uuid4())


class SequentialIdGenerator:
    """
    Deterministic generator producing ``"<prefix>-1"``, ``"<prefix>-2"``, ...

    Useful in tests and for reproducible CLI dry runs.
    """

    def __init__(self, prefix: str = "id", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


# endregion Identifier generation
