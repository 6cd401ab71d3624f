# finance_importer/controllers/__init__.py
from .category_resolver import CategoryResolver, default_category_name, suggest_subcategory_name
from .column_classifier import classify
from .date_interpreter import guess_date_format, iso_to_local_date, parse_strict
from .file_ingestor import IngestResult, ingest, read_file
from .import_errors import (
    EmptyFileError,
    FileFormatError,
    ImportFileError,
    InvalidTransitionError,
    StructuralMismatchError,
)
from .import_orchestrator import ImportOrchestrator, run_import
from .import_state_machine import Guards, ImportEvent, next_step
from .ledger_session import LedgerSession, load_categories
from .pattern_grouper import apply_groups, detect
from .row_parser import parse_rows, revalidate

__all__ = [
    "CategoryResolver", "default_category_name", "suggest_subcategory_name",
    "classify", "guess_date_format", "iso_to_local_date", "parse_strict",
    "IngestResult", "ingest", "read_file", "EmptyFileError", "FileFormatError",
    "ImportFileError", "InvalidTransitionError", "StructuralMismatchError",
    "ImportOrchestrator", "run_import", "Guards", "ImportEvent", "next_step",
    "LedgerSession", "load_categories", "apply_groups", "detect", "parse_rows",
    "revalidate"]
