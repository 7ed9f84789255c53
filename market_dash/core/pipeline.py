from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from .filter_state import FilterState, normalise_ids
from .filtering import filter_records
from .pagination import paginate
from .record_schema import RecordSchema
from .records import Record, normalise_id
from .sorting import sort_records
from .table_state import PAGE_SIZES, PageState, SortDirection, SortState, total_pages

logger = logging.getLogger(__name__)


class Trigger(Enum):
    """What changed; decides which stages have to run again."""
    RECORDS = "records"
    FILTER = "filter"
    SORT = "sort"
    PAGE = "page"


# First stage each trigger invalidates: 0 = filter, 1 = sort, 2 = paginate
_FIRST_STAGE = {
    Trigger.RECORDS: 0,
    Trigger.FILTER: 0,
    Trigger.SORT: 1,
    Trigger.PAGE: 2,
}


@dataclass(frozen=True)
class DisplaySlice:
    """
    Read-only view of the visible page, everything the table surface needs.
    """
    records: Tuple[Record, ...]
    total_records: int
    page: int
    page_size: int
    total_pages: int
    sort_state: SortState

    @property
    def first_index(self) -> int:
        if not self.records:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        if not self.records:
            return 0
        return min(self.page * self.page_size, self.total_records)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total_records

    def summary_text(self) -> str:
        return f"Showing {self.first_index} to {self.last_index} of {self.total_records} entries"


class TablePipeline:
    """
    Search -> filter -> sort -> paginate over one view's record collection.

    The pipeline owns its FilterState, SortState and PageState. Every handler
    mutates exactly one of them and then re-runs the stages downstream of it.
    Changes to the search text, structural filters, date range, sort or page
    size (and replacing the records) go back to page 1; a direct page change
    touches nothing else.

    Handlers never raise: invalid input is logged and ignored.
    """

    def __init__(
            self,
            schema: RecordSchema,
            records: Iterable[Record] = (),
            *,
            default_sort: SortState,
            page_sizes: Sequence[int] = PAGE_SIZES,
            default_page_size: Optional[int] = None,
            filter_state: Optional[FilterState] = None,
            sort_state: Optional[SortState] = None,
            page_state: Optional[PageState] = None,
    ) -> None:
        self.schema = schema
        self.page_sizes: Tuple[int, ...] = tuple(page_sizes) or PAGE_SIZES
        self.default_sort = default_sort

        if default_page_size not in self.page_sizes:
            default_page_size = self.page_sizes[0]
        self.default_page_size = default_page_size

        self.filter_state = filter_state or FilterState()
        self.sort_state = sort_state or default_sort
        self.page_state = page_state or PageState(page=1, page_size=default_page_size)
        if self.page_state.page_size not in self.page_sizes:
            self.page_state = PageState(page=1, page_size=default_page_size)

        self._records: Tuple[Record, ...] = tuple(records)
        self._filtered: Tuple[Record, ...] = ()
        self._sorted: Tuple[Record, ...] = ()
        self._display: Optional[DisplaySlice] = None
        self._recompute(Trigger.RECORDS)

    # ------------------------------------------------------------------
    # Rebuilding from a serialised state (web callbacks are stateless)
    # ------------------------------------------------------------------
    @classmethod
    def from_state(
            cls,
            schema: RecordSchema,
            records: Iterable[Record],
            data: Optional[Dict[str, Any]],
            *,
            default_sort: SortState,
            page_sizes: Sequence[int] = PAGE_SIZES,
            default_page_size: Optional[int] = None,
    ) -> TablePipeline:
        """
        Restore a pipeline from state_dict() output without applying any of the
        reset rules. Unreadable parts of the state fall back to defaults.
        """
        data = data if isinstance(data, dict) else {}

        try:
            filter_state = FilterState.from_dict(data.get("filter") or {})
        except (AttributeError, TypeError, ValueError):
            logger.warning("Invalid filter state, using defaults: %r", data.get("filter"))
            filter_state = None

        sort_state = None
        if data.get("sort"):
            try:
                sort_state = SortState.from_dict(data["sort"])
            except (AttributeError, TypeError, ValueError):
                logger.warning("Invalid sort state, using defaults: %r", data.get("sort"))

        page_state = None
        raw_page = data.get("page")
        if isinstance(raw_page, dict):
            try:
                page_state = PageState(
                    page=max(int(raw_page.get("page", 1)), 1),
                    page_size=int(raw_page.get("page_size", default_page_size or 0)),
                )
            except (TypeError, ValueError, OverflowError):
                logger.warning("Invalid page state, using defaults: %r", raw_page)

        return cls(
            schema,
            records,
            default_sort=default_sort,
            page_sizes=page_sizes,
            default_page_size=default_page_size,
            filter_state=filter_state,
            sort_state=sort_state,
            page_state=page_state,
        )

    def state_dict(self) -> Dict[str, Any]:
        return {
            "filter": self.filter_state.to_dict(),
            "sort": self.sort_state.to_dict(),
            "page": self.page_state.to_dict(),
        }

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def filtered_records(self) -> Tuple[Record, ...]:
        """The whole filtered + sorted collection (pre-pagination)."""
        return self._sorted

    def display(self) -> DisplaySlice:
        return self._display

    # ------------------------------------------------------------------
    # Record store events
    # ------------------------------------------------------------------
    def replace_records(self, records: Iterable[Record]) -> DisplaySlice:
        """A (re)fetch replaces the collection wholesale; nothing is merged."""
        self._records = tuple(records)
        self._reset_page()
        return self._recompute(Trigger.RECORDS)

    def remove_record(self, record_id: Any) -> DisplaySlice:
        key = normalise_id(record_id)
        remaining = [r for r in self._records if self.schema.record_id(r) != key]
        return self.replace_records(remaining)

    # ------------------------------------------------------------------
    # Presentation callbacks
    # ------------------------------------------------------------------
    def on_search_change(self, text: Optional[str]) -> DisplaySlice:
        self.filter_state = replace(self.filter_state, search_text=str(text or ""))
        self._reset_page()
        return self._recompute(Trigger.FILTER)

    def on_filter_change(self, dimension: str, ids: Optional[Iterable[Any]]) -> DisplaySlice:
        filters = dict(self.filter_state.structural_filters)
        allowed = normalise_ids(ids)
        if allowed:
            filters[dimension] = allowed
        else:
            filters.pop(dimension, None)
        self.filter_state = replace(self.filter_state, structural_filters=filters)
        self._reset_page()
        return self._recompute(Trigger.FILTER)

    def on_date_range_change(self, start: Optional[str], end: Optional[str]) -> DisplaySlice:
        date_range = (str(start), str(end)) if start and end else None
        self.filter_state = replace(self.filter_state, date_range=date_range)
        self._reset_page()
        return self._recompute(Trigger.FILTER)

    def on_sort_change(self, field: Optional[str], direction: Any = SortDirection.ASC) -> DisplaySlice:
        if not field:
            logger.warning("Ignoring sort change without a field")
            return self._display
        try:
            sort_direction = SortDirection(getattr(direction, "value", str(direction).lower()))
        except ValueError:
            logger.warning("Ignoring unknown sort direction %r", direction)
            return self._display

        self.sort_state = SortState(field=field, direction=sort_direction)
        self._reset_page()
        return self._recompute(Trigger.SORT)

    def on_page_change(self, page: Any) -> DisplaySlice:
        try:
            page_number = int(page)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring non-numeric page %r", page)
            return self._display
        self.page_state = replace(self.page_state, page=max(page_number, 1))
        return self._recompute(Trigger.PAGE)

    def on_page_size_change(self, size: Any) -> DisplaySlice:
        try:
            page_size = int(size)
        except (TypeError, ValueError, OverflowError):
            page_size = None
        if page_size not in self.page_sizes:
            logger.warning("Ignoring page size outside %s: %r", self.page_sizes, size)
            return self._display
        self.page_state = PageState(page=1, page_size=page_size)
        return self._recompute(Trigger.PAGE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _reset_page(self) -> None:
        if self.page_state.page != 1:
            self.page_state = replace(self.page_state, page=1)

    def _recompute(self, trigger: Trigger) -> DisplaySlice:
        first_stage = _FIRST_STAGE[trigger]

        if first_stage <= 0:
            self._filtered = tuple(filter_records(self._records, self.filter_state, self.schema))
        if first_stage <= 1:
            self._sorted = tuple(sort_records(self._filtered, self.sort_state, self.schema))

        total = len(self._sorted)
        self.page_state = self.page_state.clamped(total)
        result = paginate(self._sorted, self.page_state)

        self._display = DisplaySlice(
            records=result.records,
            total_records=result.total_records,
            page=self.page_state.page,
            page_size=self.page_state.page_size,
            total_pages=total_pages(total, self.page_state.page_size),
            sort_state=self.sort_state,
        )
        logger.debug(
            "pipeline_recompute",
            extra={
                "trigger": trigger.value,
                "n_records": len(self._records),
                "n_filtered": total,
                "page": self.page_state.page,
            },
        )
        return self._display
