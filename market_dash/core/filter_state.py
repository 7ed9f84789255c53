from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set, Tuple

from .records import normalise_id


def normalise_ids(values: Optional[Iterable[Any]]) -> Set[str]:
    ids = set()
    for value in values or ():
        key = normalise_id(value)
        if key is not None:
            ids.add(key)
    return ids


@dataclass
class FilterState:
    """
    Represents the current search/filter selection of one table view.

    Fields:

    - search_text: free text matched case-insensitively as a substring of any searchable field
    - structural_filters: dimension -> allowed ids. A record must match every non-empty dimension;
      an empty set means the dimension is not filtering anything.
    - date_range: inclusive (start, end) pair applied to the view's date field, or None

    """

    search_text: str = ""
    structural_filters: Dict[str, Set[str]] = field(default_factory=dict)
    date_range: Optional[Tuple[str, str]] = None

    def active_filters(self) -> Dict[str, Set[str]]:
        return {dim: ids for dim, ids in self.structural_filters.items() if ids}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search_text": self.search_text,
            "structural_filters": {
                dim: sorted(ids) for dim, ids in self.structural_filters.items()
            },
            "date_range": list(self.date_range) if self.date_range else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        raw_filters = data.get("structural_filters") or {}
        raw_range = data.get("date_range")
        date_range = None
        if raw_range and len(raw_range) == 2 and all(raw_range):
            date_range = (str(raw_range[0]), str(raw_range[1]))

        return cls(
            search_text=str(data.get("search_text") or ""),
            structural_filters={
                str(dim): normalise_ids(ids) for dim, ids in raw_filters.items()
            },
            date_range=date_range,
        )
