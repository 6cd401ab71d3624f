# finance_importer/controllers/import_errors.py
"""
Error taxonomy for the import dialog.

``ImportFileError`` and its subclasses are *dialog-level* conditions: the
orchestrator catches them, shows ``user_message`` and stays at UPLOAD so the
operator can pick another file. Per-row date failures are not exceptions at all;
they are collected as ``FailedRow`` records.
"""
from __future__ import annotations


class ImportFileError(ValueError):
    """Base for problems with the selected file as a whole."""

    default_message = "The selected file could not be imported."

    def __init__(self, detail: str = "", *, user_message: str = "") -> None:
        self.detail = detail
        self.user_message = user_message or self.default_message
        super().__init__(detail or self.user_message)


class FileFormatError(ImportFileError):
    """Content is unparseable under the grammar its extension implies."""

    default_message = "The file is not a valid CSV or JSON file."


class StructuralMismatchError(ImportFileError):
    """JSON parsed, but it is neither a backup nor a flattenable transaction list."""

    default_message = "Unrecognized JSON structure: expected a backup or a list of transactions."


class EmptyFileError(ImportFileError):
    """No usable rows."""

    default_message = "The file is empty."


class InvalidTransitionError(RuntimeError):
    """An orchestrator operation was called in a state that does not allow it."""
