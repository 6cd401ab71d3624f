# finance_importer/controllers/import_state_machine.py
"""
Transition table of the import dialog, kept free of any I/O or rendering.

``next_step`` is a pure function of the current step, the event that occurred
and the guard predicates evaluated by the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from finance_importer.data_model import ImportStep

from .import_errors import InvalidTransitionError


class ImportEvent(str, Enum):
    FILE_PARSED = "FILE_PARSED"
    BACKUP_DETECTED = "BACKUP_DETECTED"
    MODE_CHOSEN = "MODE_CHOSEN"
    MAPPING_CONFIRMED = "MAPPING_CONFIRMED"
    CORRECTION_APPLIED = "CORRECTION_APPLIED"
    GROUPS_CONFIRMED = "GROUPS_CONFIRMED"
    RESTORE_CONFIRMED = "RESTORE_CONFIRMED"
    CANCEL = "CANCEL"


@dataclass(frozen=True)
class Guards:
    """Predicates the transition function branches on."""

    has_existing_transactions: bool = False
    has_failures: bool = False
    has_groups: bool = False


_TERMINAL = (ImportStep.FINALIZED, ImportStep.CANCELLED)


def _after_rows_ready(guards: Guards) -> ImportStep:
    return ImportStep.GROUP if guards.has_groups else ImportStep.FINALIZED


def next_step(step: ImportStep, event: ImportEvent, guards: Guards = Guards()) -> ImportStep:
    """
    Return the step that follows ``step`` when ``event`` happens.

    Raises
    ------
    InvalidTransitionError
        If ``event`` is not accepted in ``step``.
    """
    step = ImportStep(step)
    event = ImportEvent(event)

    if event is ImportEvent.CANCEL:
        if step in _TERMINAL:
            raise InvalidTransitionError(f"Cannot cancel from {step.value}")
        return ImportStep.CANCELLED

    if step is ImportStep.UPLOAD:
        if event is ImportEvent.BACKUP_DETECTED:
            return ImportStep.BACKUP_CONFIRM
        if event is ImportEvent.FILE_PARSED:
            return ImportStep.DECISION if guards.has_existing_transactions else ImportStep.MAP
    elif step is ImportStep.DECISION:
        if event is ImportEvent.MODE_CHOSEN:
            return ImportStep.MAP
    elif step is ImportStep.MAP:
        if event is ImportEvent.MAPPING_CONFIRMED:
            if guards.has_failures:
                return ImportStep.DATE_CORRECTION
            return _after_rows_ready(guards)
    elif step is ImportStep.DATE_CORRECTION:
        if event is ImportEvent.CORRECTION_APPLIED:
            return _after_rows_ready(guards)
    elif step is ImportStep.GROUP:
        if event is ImportEvent.GROUPS_CONFIRMED:
            return ImportStep.FINALIZED
    elif step is ImportStep.BACKUP_CONFIRM:
        if event is ImportEvent.RESTORE_CONFIRMED:
            return ImportStep.FINALIZED

    raise InvalidTransitionError(f"Event {event.value} is not allowed in step {step.value}")
