from .grouped_transaction import GroupedTransaction
from .import_result import ImportResult
from .parsed_candidate import FailedRow, ParsedCandidate
from .valid_item import ValidItem

__all__ = ["FailedRow", "GroupedTransaction", "ImportResult", "ParsedCandidate", "ValidItem"]
