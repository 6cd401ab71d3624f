# finance_importer/data_model/interfaces/i_to_dict.py
from __future__ import annotations

from typing import Any, Dict

from typing_extensions import Protocol, TypeAlias, runtime_checkable

JsonDict: TypeAlias = Dict[str, Any]


@runtime_checkable
class IToDict(Protocol):
    def to_dict(self) -> JsonDict: ...
