from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class GroupedTransaction:
    """
    Cluster of similarly-described uncategorized expenses proposed for bulk
    categorization. Mutable: the operator toggles and edits it during review.
    """

    signature: str
    example_description: str
    member_ids: List[str] = field(default_factory=list)
    proposed_category_name: str = "Other"
    proposed_subcategory_name: str = "Other"
    enabled: bool = True

    @property
    def count(self) -> int:
        return len(self.member_ids)
