from enum import Enum


class ImportStep(str, Enum):
    """
    States of the import dialog.

    FINALIZED and CANCELLED are transition targets only; the orchestrator resets
    to UPLOAD as soon as it reaches either of them.
    """
    UPLOAD = "UPLOAD"
    DECISION = "DECISION"
    MAP = "MAP"
    DATE_CORRECTION = "DATE_CORRECTION"
    GROUP = "GROUP"
    BACKUP_CONFIRM = "BACKUP_CONFIRM"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"
