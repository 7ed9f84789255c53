from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import plotly.graph_objs as go

from market_dash.config.model import ViewConfig
from market_dash.core.base_view import BaseTableView
from market_dash.core.exceptions import AccessDenied, MutationFailure
from market_dash.core.pipeline import DisplaySlice, TablePipeline
from market_dash.core.records import Record
from market_dash.core.session import UserSession
from market_dash.core.table_state import PAGE_SIZES, SortDirection
from market_dash.core.view_registry import ViewRegistry
from market_dash.services.export_service import ExportService
from market_dash.services.record_store import RecordStoreManager

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Events the table surface sends back into the pipeline."""
    RENDER = "render"
    SEARCH = "search"
    FILTER = "filter"
    DATE_RANGE = "date_range"
    SORT = "sort"
    PAGE = "page"
    PREVIOUS_PAGE = "previous_page"
    NEXT_PAGE = "next_page"
    PAGE_SIZE = "page_size"
    REFRESH = "refresh"
    DELETE = "delete"


@dataclass(frozen=True)
class TableEvent:
    """
    kind + payload:
    - SEARCH: text
    - FILTER: (dimension, ids)
    - DATE_RANGE: (start, end)
    - SORT: (field, direction), or None to flip the direction of the current sort column
    - PAGE: page number
    - PAGE_SIZE: size
    - DELETE: record id
    """
    kind: EventKind
    value: Any = None


@dataclass(frozen=True)
class Notice:
    """Transient, dismissible message for the user."""
    message: str
    kind: str = "success"  # "success" | "danger"


@dataclass(frozen=True)
class TableResponse:
    view: BaseTableView
    display: DisplaySlice
    state: Dict[str, Any]
    rows: List[Dict[str, Any]]
    filtered_records: Tuple[Record, ...]
    notice: Optional[Notice] = None

    def summary_figure(self) -> go.Figure:
        return self.view.render_summary(self.view.compute_summary(self.filtered_records))


class TableService:
    """
    Stateless glue between the web surface and the pipeline.

    Each call rebuilds a TablePipeline from the browser-held state and the
    shared record store, applies one event and hands back the new state. No
    two requests share a pipeline instance.
    """

    def __init__(
            self,
            *,
            registry: ViewRegistry,
            stores: RecordStoreManager,
            cfg_by_id: Optional[Dict[str, ViewConfig]] = None,
            page_sizes: Sequence[int] = PAGE_SIZES,
            export_service: Optional[ExportService] = None,
    ) -> None:
        self._registry = registry
        self._stores = stores
        self._cfg_by_id = cfg_by_id or {}
        self.page_sizes = tuple(page_sizes)
        self.export_service = export_service or ExportService()

    def view_for(self, view_id: str, session: Optional[UserSession]) -> BaseTableView:
        """
        :raises KeyError: unknown view
        :raises AccessDenied: the session fails the view's page guard
        """
        view = self._registry.create(view_id, session=session, config=self._cfg_by_id.get(view_id))
        if not view.can_view():
            raise AccessDenied(f"No access to '{view.label}'")
        return view

    def records_for(self, view_id: str) -> Tuple[Record, ...]:
        return self._stores[view_id].records

    def build(
            self,
            view_id: str,
            session: Optional[UserSession],
            state: Optional[Dict[str, Any]],
    ) -> Tuple[BaseTableView, TablePipeline]:
        view = self.view_for(view_id, session)
        pipeline = view.build_pipeline(self.records_for(view_id), state, page_sizes=self.page_sizes)
        return view, pipeline

    def handle(
            self,
            view_id: str,
            session: Optional[UserSession],
            state: Optional[Dict[str, Any]],
            event: Optional[TableEvent] = None,
    ) -> TableResponse:
        event = event or TableEvent(EventKind.RENDER)
        view, pipeline = self.build(view_id, session, state)
        notice = self._apply(view, pipeline, event)

        store = self._stores[view_id]
        if notice is None and store.last_error:
            notice = Notice(store.last_error, "danger")

        display = pipeline.display()
        return TableResponse(
            view=view,
            display=display,
            state=pipeline.state_dict(),
            rows=view.to_rows(display.records),
            filtered_records=pipeline.filtered_records,
            notice=notice,
        )

    def export(
            self,
            view_id: str,
            session: Optional[UserSession],
            state: Optional[Dict[str, Any]],
            fmt: str,
    ) -> Tuple[bytes, str]:
        view, pipeline = self.build(view_id, session, state)
        return self.export_service.export(view, pipeline.filtered_records, fmt)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------
    def _apply(self, view: BaseTableView, pipeline: TablePipeline, event: TableEvent) -> Optional[Notice]:
        kind = event.kind

        if kind is EventKind.RENDER:
            return None
        if kind is EventKind.SEARCH:
            pipeline.on_search_change(event.value)
        elif kind is EventKind.FILTER:
            dimension, ids = event.value
            pipeline.on_filter_change(dimension, ids)
        elif kind is EventKind.DATE_RANGE:
            start, end = event.value or (None, None)
            pipeline.on_date_range_change(start, end)
        elif kind is EventKind.SORT:
            self._apply_sort(view, pipeline, event.value)
        elif kind is EventKind.PAGE:
            pipeline.on_page_change(event.value)
        elif kind is EventKind.PREVIOUS_PAGE:
            pipeline.on_page_change(pipeline.page_state.page - 1)
        elif kind is EventKind.NEXT_PAGE:
            pipeline.on_page_change(pipeline.page_state.page + 1)
        elif kind is EventKind.PAGE_SIZE:
            pipeline.on_page_size_change(event.value)
        elif kind is EventKind.REFRESH:
            store = self._stores.refresh(view.id)
            pipeline.replace_records(view.scope_records(store.records))
        elif kind is EventKind.DELETE:
            return self._delete(view, pipeline, event.value)
        return None

    def _apply_sort(self, view: BaseTableView, pipeline: TablePipeline, value: Any) -> None:
        if not value:
            # The table cycles a header asc -> desc -> none; treat "none" as a toggle
            current = pipeline.sort_state
            flipped = SortDirection.ASC if current.direction is SortDirection.DESC else SortDirection.DESC
            pipeline.on_sort_change(current.field, flipped)
            return
        field, direction = value
        if field not in view.sortable_fields():
            logger.warning("Ignoring sort on non-sortable column", extra={"view_id": view.id, "field": field})
            return
        pipeline.on_sort_change(field, direction)

    def _delete(self, view: BaseTableView, pipeline: TablePipeline, record_id: Any) -> Notice:
        if not view.can_delete():
            raise AccessDenied(f"Deleting from '{view.label}' is not allowed")
        if record_id is None:
            return Notice("Select a row to delete first", "danger")

        try:
            store = self._stores[view.id]
            store.remove(record_id)
        except MutationFailure as e:
            logger.error(
                "Delete failed",
                extra={"view_id": view.id, "record_id": record_id, "error": str(e)},
            )
            return Notice(f"Error deleting record: {e}", "danger")

        pipeline.replace_records(view.scope_records(store.records))
        return Notice(f"{view.record_label} deleted successfully")
