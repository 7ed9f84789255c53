from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .records import Record
from .table_state import PageState


@dataclass(frozen=True)
class PageResult:
    """
    One page of records plus the pre-slice length of the collection it came from.
    """
    records: Tuple[Record, ...]
    total_records: int


def paginate(records: Sequence[Record], state: PageState) -> PageResult:
    """
    Slice records[(page-1)*size : page*size]. A page past the end gives an
    empty slice rather than an error.
    """
    page = max(state.page, 1)
    start = (page - 1) * state.page_size
    end = start + state.page_size
    return PageResult(records=tuple(records[start:end]), total_records=len(records))
