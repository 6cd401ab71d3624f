from .config_logging import LOGGING, configure_logging
from .converters_scalar import parse_amount, to_bool, to_decimal, to_js_string
from .core_util import (
    IdGenerator,
    SequentialIdGenerator,
    is_null_or_whitespace,
    normalize_key,
    open_for_read,
    uuid_id_generator,
)
from .import_rules import DEFAULT_RULES, ImportRules, load_import_rules

__all__ = [
    "is_null_or_whitespace",
    "normalize_key",
    "open_for_read",
    "parse_amount",
    "to_bool",
    "to_decimal",
    "to_js_string",
    "IdGenerator",
    "SequentialIdGenerator",
    "uuid_id_generator",
    "ImportRules",
    "DEFAULT_RULES",
    "load_import_rules",
    "LOGGING",
    "configure_logging",
]
