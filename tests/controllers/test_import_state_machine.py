from __future__ import annotations

import pytest

from finance_importer.controllers.import_errors import InvalidTransitionError
from finance_importer.controllers.import_state_machine import Guards, ImportEvent, next_step
from finance_importer.data_model import ImportStep as St

E = ImportEvent


@pytest.mark.parametrize(
    "step,event,guards,expected",
    [
        (St.UPLOAD, E.BACKUP_DETECTED, Guards(), St.BACKUP_CONFIRM),
        (St.UPLOAD, E.FILE_PARSED, Guards(has_existing_transactions=True), St.DECISION),
        (St.UPLOAD, E.FILE_PARSED, Guards(has_existing_transactions=False), St.MAP),
        (St.DECISION, E.MODE_CHOSEN, Guards(), St.MAP),
        (St.MAP, E.MAPPING_CONFIRMED, Guards(has_failures=True, has_groups=True), St.DATE_CORRECTION),
        (St.MAP, E.MAPPING_CONFIRMED, Guards(has_groups=True), St.GROUP),
        (St.MAP, E.MAPPING_CONFIRMED, Guards(), St.FINALIZED),
        (St.DATE_CORRECTION, E.CORRECTION_APPLIED, Guards(has_groups=True), St.GROUP),
        (St.DATE_CORRECTION, E.CORRECTION_APPLIED, Guards(), St.FINALIZED),
        (St.GROUP, E.GROUPS_CONFIRMED, Guards(), St.FINALIZED),
        (St.BACKUP_CONFIRM, E.RESTORE_CONFIRMED, Guards(), St.FINALIZED),
    ],
)
def test_transition_table(step, event, guards, expected):
    """Positive: each allowed (step, event, guards) triple leads to its documented step."""
    assert next_step(step, event, guards) is expected


@pytest.mark.parametrize(
    "step",
    [St.UPLOAD, St.DECISION, St.MAP, St.DATE_CORRECTION, St.GROUP, St.BACKUP_CONFIRM],
)
def test_cancel_is_reachable_from_every_live_step(step):
    """Positive: the dialog can be dismissed anywhere."""
    assert next_step(step, E.CANCEL) is St.CANCELLED


@pytest.mark.parametrize(
    "step,event",
    [
        (St.UPLOAD, E.MAPPING_CONFIRMED),
        (St.DECISION, E.FILE_PARSED),
        (St.MAP, E.GROUPS_CONFIRMED),
        (St.GROUP, E.CORRECTION_APPLIED),
        (St.BACKUP_CONFIRM, E.MODE_CHOSEN),
        (St.FINALIZED, E.CANCEL),
        (St.CANCELLED, E.FILE_PARSED),
    ],
)
def test_illegal_transitions_raise(step, event):
    """Negative: events outside the table are programming errors."""
    with pytest.raises(InvalidTransitionError):
        next_step(step, event)


def test_next_step_accepts_values():
    """Edge: steps and events may be passed by their string values."""
    assert next_step("UPLOAD", "FILE_PARSED") is St.MAP
