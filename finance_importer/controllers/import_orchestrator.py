# finance_importer/controllers/import_orchestrator.py
"""
Import dialog driver.

``ImportOrchestrator`` owns the transient state of one import run and walks it
through the steps defined in ``import_state_machine``:

    UPLOAD -> [DECISION] -> MAP -> [DATE_CORRECTION] -> [GROUP] -> FINALIZED
    UPLOAD -> BACKUP_CONFIRM -> FINALIZED (restore)
    any    -> CANCELLED

Every operation checks that it is allowed in the current step and raises
``InvalidTransitionError`` otherwise. Dialog-level file errors never raise: they
are stored in ``error`` and the orchestrator stays at UPLOAD.

FINALIZED and CANCELLED are reported by the operation that reaches them; the
orchestrator then resets to UPLOAD, dropping all transient state. A finished
import is emitted to ``on_import`` exactly once and kept in ``last_result``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from finance_importer.data_model import (
    BackupData,
    CategoryItem,
    ColumnRole,
    DateFormat,
    FailedRow,
    GroupedTransaction,
    ImportMode,
    ImportResult,
    ImportStep,
    Transaction,
    ValidItem,
)
from finance_importer.utilities import (
    DEFAULT_RULES,
    IdGenerator,
    ImportRules,
    uuid_id_generator,
)

from . import column_classifier, pattern_grouper
from .category_resolver import CategoryResolver, suggest_subcategory_name
from .date_interpreter import guess_date_format, preview, propose_secondary_format
from .file_ingestor import ingest, read_file
from .import_errors import ImportFileError, InvalidTransitionError
from .import_state_machine import Guards, ImportEvent, next_step
from .row_parser import parse_rows, revalidate

log = logging.getLogger(__name__)

ImportCallback = Callable[[List[Transaction], bool, List[CategoryItem]], object]
RestoreCallback = Callable[[BackupData], None]

_DECIMAL_CHOICES = ("", ".", ",")


class ImportOrchestrator:
    """
    State machine for importing one file into a ledger.

    Parameters
    ----------
    existing_categories : Iterable[CategoryItem]
        Current taxonomy of the destination. Read only; touched categories are
        cloned.
    has_existing_transactions : bool
        Whether the destination already holds transactions (gates DECISION).
    on_import : callable
        ``on_import(transactions, clear_existing, new_categories)``; called once
        per finished import.
    on_restore : callable, optional
        ``on_restore(backup)``; required only to confirm a backup restore.
    rules : ImportRules, optional
        Keyword table, noise prefixes and default names.
    id_generator : IdGenerator, optional
        Id source for items, categories and subcategories.
    """

    def __init__(
        self,
        existing_categories: Iterable[CategoryItem],
        has_existing_transactions: bool,
        on_import: ImportCallback,
        on_restore: Optional[RestoreCallback] = None,
        *,
        rules: Optional[ImportRules] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.existing_categories: Tuple[CategoryItem, ...] = tuple(existing_categories)
        self.has_existing_transactions = has_existing_transactions
        self.on_import = on_import
        self.on_restore = on_restore
        self.rules = rules or DEFAULT_RULES
        self.id_generator = id_generator or uuid_id_generator
        self.last_result: Optional[ImportResult] = None
        self._reset()

    # --- Lifecycle ---------------------------------------------------------

    def _reset(self) -> None:
        self.step = ImportStep.UPLOAD
        self.error = ""
        self.file_name = ""
        self.rows: List[List[str]] = []
        self.backup: Optional[BackupData] = None
        self.mode = ImportMode.APPEND
        self.mapping: Dict[int, ColumnRole] = {}
        self.has_header = True
        self.date_format = DateFormat.YYYY_MM_DD
        self.mapping_edited = False
        self.date_format_edited = False
        self.decimal_char = ""
        self.valid_items: List[ValidItem] = []
        self.failed_rows: List[FailedRow] = []
        self.secondary_format = DateFormat.DD_MM_YYYY
        self.dropped_count = 0
        self.groups: List[GroupedTransaction] = []

    def _require(self, *steps: ImportStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise InvalidTransitionError(
                f"Operation requires step {allowed}; current step is {self.step.value}"
            )

    def _advance(self, event: ImportEvent, guards: Guards = Guards()) -> ImportStep:
        new = next_step(self.step, event, guards)
        log.debug("Import step %s --%s--> %s", self.step.value, event.value, new.value)
        self.step = new
        return new

    def cancel(self) -> ImportStep:
        """Discard the run from any step. Nothing is emitted."""
        self._advance(ImportEvent.CANCEL)
        log.info("Import cancelled")
        self._reset()
        return ImportStep.CANCELLED

    # --- UPLOAD ------------------------------------------------------------

    def upload(self, file_name: str, content: Union[str, bytes]) -> ImportStep:
        """
        Ingest a selected file.

        On a dialog-level error the message is stored in ``error`` and the
        step stays UPLOAD so another file can be chosen.
        """
        self._require(ImportStep.UPLOAD)
        self.error = ""
        try:
            result = ingest(file_name, content)
        except ImportFileError as exc:
            log.warning("Rejected %s: %s", file_name, exc)
            self.error = exc.user_message
            return self.step

        self.file_name = result.file_name
        if result.is_backup:
            self.backup = result.backup
            return self._advance(ImportEvent.BACKUP_DETECTED)

        self.rows = result.rows
        new = self._advance(
            ImportEvent.FILE_PARSED,
            Guards(has_existing_transactions=self.has_existing_transactions),
        )
        if new is ImportStep.MAP:
            self._enter_map()
        return new

    def upload_path(self, path: Path, encoding: str = "utf-8") -> ImportStep:
        """Read ``path`` and ``upload`` its content."""
        self._require(ImportStep.UPLOAD)
        try:
            name, text = read_file(path, encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Could not read %s: %s", path, exc)
            self.error = f"Could not read {Path(path).name}."
            return self.step
        return self.upload(name, text)

    # --- DECISION ----------------------------------------------------------

    def choose_mode(self, mode: Union[ImportMode, str]) -> ImportStep:
        """Record APPEND or REPLACE; it only takes effect at finalization."""
        self._require(ImportStep.DECISION)
        self.mode = ImportMode(mode)
        log.info("Import mode: %s", self.mode.value)
        self._advance(ImportEvent.MODE_CHOSEN)
        self._enter_map()
        return self.step

    # --- MAP ---------------------------------------------------------------

    @property
    def column_count(self) -> int:
        return column_classifier.table_width(self.rows)

    @property
    def header(self) -> Optional[List[str]]:
        return self.rows[0] if self.has_header and self.rows else None

    def _data_rows(self) -> List[List[str]]:
        return self.rows[1:] if self.has_header else self.rows

    def _enter_map(self) -> None:
        self._suggest_mapping()
        self.date_format = self._guess_primary_format()
        log.info(
            "Mapping suggested for %s: %s (dates %s)",
            self.file_name,
            {i: r.value for i, r in self.mapping.items()},
            self.date_format.value,
        )

    def _suggest_mapping(self) -> None:
        self.mapping = column_classifier.complete_mapping(
            column_classifier.classify(self.rows, self.has_header, rules=self.rules),
            self.column_count,
        )

    def _guess_primary_format(self) -> DateFormat:
        col = column_classifier.find_column(self.mapping, ColumnRole.DATE)
        if col is None:
            return DateFormat.YYYY_MM_DD
        for row in self._data_rows():
            if col < len(row) and row[col].strip():
                return guess_date_format(row[col].strip()) or DateFormat.YYYY_MM_DD
        return DateFormat.YYYY_MM_DD

    def set_mapping(self, column: int, role: Union[ColumnRole, str]) -> None:
        self._require(ImportStep.MAP)
        if column < 0 or column >= self.column_count:
            raise ValueError(f"Column {column} is outside 0..{self.column_count - 1}")
        self.mapping[column] = ColumnRole(role)
        self.mapping_edited = True

    def set_has_header(self, has_header: bool) -> None:
        """
        Toggle whether row 0 holds titles. Suggestions made from the old setting
        are redone unless the operator has already edited them.
        """
        self._require(ImportStep.MAP)
        has_header = bool(has_header)
        if has_header == self.has_header:
            return
        self.has_header = has_header
        if not self.mapping_edited:
            self._suggest_mapping()
        if not self.date_format_edited:
            self.date_format = self._guess_primary_format()
        log.info("Header row %s; mapping %s", "on" if has_header else "off",
                 {i: r.value for i, r in self.mapping.items()})

    def set_date_format(self, fmt: Union[DateFormat, str]) -> None:
        self._require(ImportStep.MAP)
        self.date_format = DateFormat(fmt)
        self.date_format_edited = True

    def set_decimal_separator(self, decimal_char: str) -> None:
        self._require(ImportStep.MAP)
        if decimal_char not in _DECIMAL_CHOICES:
            raise ValueError(f"Decimal separator must be one of {_DECIMAL_CHOICES!r}")
        self.decimal_char = decimal_char

    def confirm_mapping(self) -> ImportStep:
        """
        Parse every data row under the current mapping and primary format.

        Returns the step reached: DATE_CORRECTION, GROUP or FINALIZED.
        """
        self._require(ImportStep.MAP)
        self.valid_items, self.failed_rows = parse_rows(
            self.rows,
            self.mapping,
            self.date_format,
            has_header=self.has_header,
            decimal_char=self.decimal_char,
            rules=self.rules,
            id_generator=self.id_generator,
        )
        has_failures = bool(self.failed_rows)
        if has_failures:
            self.secondary_format = propose_secondary_format(
                self.date_format, [f.date_str for f in self.failed_rows]
            )
        else:
            self.groups = pattern_grouper.detect(self.valid_items, self.rules)
        new = self._advance(
            ImportEvent.MAPPING_CONFIRMED,
            Guards(has_failures=has_failures, has_groups=bool(self.groups)),
        )
        return self._settle(new)

    # --- DATE_CORRECTION ---------------------------------------------------

    def set_secondary_format(self, fmt: Union[DateFormat, str]) -> None:
        self._require(ImportStep.DATE_CORRECTION)
        self.secondary_format = DateFormat(fmt)

    def correction_preview(
        self, fmt: Optional[Union[DateFormat, str]] = None
    ) -> List[Tuple[str, Optional[str]]]:
        """First failed dates re-parsed under ``fmt`` (the secondary format by default)."""
        self._require(ImportStep.DATE_CORRECTION)
        chosen = DateFormat(fmt) if fmt is not None else self.secondary_format
        return preview([f.date_str for f in self.failed_rows], chosen)

    def apply_correction(self) -> ImportStep:
        """
        Retry the failed rows once under the secondary format.

        Rows that still fail are dropped for good; their number is kept in
        ``dropped_count``.
        """
        self._require(ImportStep.DATE_CORRECTION)
        recovered, still = revalidate(
            self.failed_rows,
            self.secondary_format,
            rules=self.rules,
            id_generator=self.id_generator,
        )
        self.valid_items.extend(recovered)
        self.failed_rows = []
        self.dropped_count = len(still)
        if still:
            log.warning(
                "Dropping %d rows whose dates parse under neither %s nor %s",
                len(still),
                self.date_format.value,
                self.secondary_format.value,
            )
        log.info("Recovered %d rows under %s", len(recovered), self.secondary_format.value)
        self.groups = pattern_grouper.detect(self.valid_items, self.rules)
        new = self._advance(ImportEvent.CORRECTION_APPLIED, Guards(has_groups=bool(self.groups)))
        return self._settle(new)

    # --- GROUP -------------------------------------------------------------

    def _group(self, signature: str) -> GroupedTransaction:
        for g in self.groups:
            if g.signature == signature:
                return g
        raise KeyError(signature)

    def toggle_group(self, signature: str) -> bool:
        self._require(ImportStep.GROUP)
        g = self._group(signature)
        g.enabled = not g.enabled
        return g.enabled

    def set_group_category(self, signature: str, category_name: str) -> None:
        """Re-target a group; its subcategory is re-suggested for the new category."""
        self._require(ImportStep.GROUP)
        g = self._group(signature)
        g.proposed_category_name = category_name
        g.proposed_subcategory_name = suggest_subcategory_name(
            category_name, self.existing_categories, self.rules
        )

    def set_group_subcategory(self, signature: str, subcategory_name: str) -> None:
        self._require(ImportStep.GROUP)
        self._group(signature).proposed_subcategory_name = subcategory_name

    def confirm_groups(self) -> ImportStep:
        self._require(ImportStep.GROUP)
        return self._settle(self._advance(ImportEvent.GROUPS_CONFIRMED))

    # --- BACKUP_CONFIRM ----------------------------------------------------

    def confirm_restore(self) -> ImportStep:
        """Hand the detected backup to the restore collaborator, then reset."""
        self._require(ImportStep.BACKUP_CONFIRM)
        if self.on_restore is None:
            raise InvalidTransitionError("No restore handler is configured")
        backup = self.backup
        self._advance(ImportEvent.RESTORE_CONFIRMED)
        log.info(
            "Restoring backup %s: %d categories, %d transactions",
            self.file_name,
            len(backup.categories),
            len(backup.transactions),
        )
        self._reset()
        self.on_restore(backup)
        return ImportStep.FINALIZED

    # --- FINALIZED ---------------------------------------------------------

    def _settle(self, step: ImportStep) -> ImportStep:
        if step is ImportStep.FINALIZED:
            self._finalize()
        return step

    def build_result(self) -> ImportResult:
        """Materialize categories and transactions from the current valid set."""
        items = pattern_grouper.apply_groups(self.valid_items, self.groups)
        resolver = CategoryResolver(
            self.existing_categories, id_generator=self.id_generator, rules=self.rules
        )
        transactions: List[Transaction] = []
        for item in items:
            cat, sub = resolver.resolve_pair(item.category_name, item.subcategory_name, item.type)
            transactions.append(
                Transaction(
                    id=item.id,
                    date=item.date,
                    amount=item.amount,
                    description=item.description,
                    type=item.type,
                    category_id=cat.id,
                    subcategory_id=sub.id,
                )
            )
        return ImportResult(
            transactions=tuple(transactions),
            clear_existing=self.mode is ImportMode.REPLACE,
            new_categories=tuple(resolver.deltas()),
            dropped_count=self.dropped_count,
        )

    def _finalize(self) -> None:
        result = self.build_result()
        self._reset()
        self.last_result = result
        log.info(
            "Import finalized: %d transactions, %d categories touched, %d dropped, clear_existing=%s",
            len(result.transactions),
            len(result.new_categories),
            result.dropped_count,
            result.clear_existing,
        )
        self.on_import(list(result.transactions), result.clear_existing, list(result.new_categories))

    # --- Convenience -------------------------------------------------------

    @property
    def groups_by_signature(self) -> Dict[str, GroupedTransaction]:
        return {g.signature: g for g in self.groups}

    def summary(self) -> Dict[str, object]:
        """Counts for display at any step."""
        return {
            "step": self.step.value,
            "file": self.file_name,
            "rows": len(self._data_rows()),
            "valid": len(self.valid_items),
            "failed": len(self.failed_rows),
            "groups": len(self.groups),
            "dropped": self.dropped_count,
        }


def run_import(
    orchestrator: ImportOrchestrator,
    file_name: str,
    content: Union[str, bytes],
    *,
    mode: ImportMode = ImportMode.APPEND,
    overrides: Optional[Dict[int, ColumnRole]] = None,
    has_header: Optional[bool] = None,
    date_format: Optional[DateFormat] = None,
    secondary_format: Optional[DateFormat] = None,
    decimal_char: Optional[str] = None,
    group_categories: Optional[Dict[str, str]] = None,
    skip_groups: bool = False,
    restore: bool = False,
    ignore_signatures: Sequence[str] = (),
) -> ImportStep:
    """
    Drive ``orchestrator`` through a whole run without an operator.

    Each decision the dialog would ask for is taken from the keyword arguments
    (or left at the orchestrator's suggestion). Returns the final step reached;
    UPLOAD with ``orchestrator.error`` set means the file was rejected, and
    BACKUP_CONFIRM means a backup was found but ``restore`` was not requested.
    """
    step = orchestrator.upload(file_name, content)
    if orchestrator.error:
        return step
    if step is ImportStep.BACKUP_CONFIRM:
        return orchestrator.confirm_restore() if restore else step
    if step is ImportStep.DECISION:
        step = orchestrator.choose_mode(mode)

    if has_header is not None:
        orchestrator.set_has_header(has_header)
    for col, role in (overrides or {}).items():
        orchestrator.set_mapping(col, role)
    if date_format is not None:
        orchestrator.set_date_format(date_format)
    if decimal_char is not None:
        orchestrator.set_decimal_separator(decimal_char)
    step = orchestrator.confirm_mapping()

    if step is ImportStep.DATE_CORRECTION:
        if secondary_format is not None:
            orchestrator.set_secondary_format(secondary_format)
        step = orchestrator.apply_correction()

    if step is ImportStep.GROUP:
        for sig in list(orchestrator.groups_by_signature):
            if skip_groups or sig in ignore_signatures:
                orchestrator.toggle_group(sig)
            elif group_categories and sig in group_categories:
                orchestrator.set_group_category(sig, group_categories[sig])
        step = orchestrator.confirm_groups()
    return step
