from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

# Page-size choices offered by every table
PAGE_SIZES: Tuple[int, ...] = (10, 20, 30, 50, 100)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """Exactly one active sort field and its direction."""
    field: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "direction": self.direction.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SortState:
        """
        :raises ValueError: if the field is empty or the direction is not asc/desc
        """
        field_name = data.get("field")
        if not field_name:
            raise ValueError("Sort state needs a field")
        direction = SortDirection(str(data.get("direction", "asc")).lower())
        return cls(field=str(field_name), direction=direction)


def total_pages(total_records: int, page_size: int) -> int:
    """ceil(total / size); an empty collection has zero pages."""
    if total_records <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_records / page_size)


@dataclass(frozen=True)
class PageState:
    page: int = 1
    page_size: int = PAGE_SIZES[0]

    def clamped(self, total_records: int) -> PageState:
        """
        Keep (page-1)*page_size < total_records; with no records the page is 1.
        """
        last = total_pages(total_records, self.page_size)
        if last == 0:
            page = 1
        else:
            page = min(max(self.page, 1), last)
        if page == self.page:
            return self
        return PageState(page=page, page_size=self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        return {"page": self.page, "page_size": self.page_size}
