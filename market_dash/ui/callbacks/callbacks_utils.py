from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from market_dash.services.table_service import EventKind, TableEvent
from market_dash.ui.ids import IDs

logger = logging.getLogger(__name__)


def filter_values(inputs_list: List[Any]) -> Dict[str, Any]:
    """
    dimension -> current dropdown value, read from the ALL-wildcard entry of
    dash.ctx.inputs_list.
    """
    for entry in inputs_list:
        if not isinstance(entry, list):
            continue
        values = {}
        for item in entry:
            component_id = item.get("id")
            if isinstance(component_id, dict) and component_id.get("type") == IDs.Pattern.FILTER:
                values[component_id["dimension"]] = item.get("value")
        if values:
            return values
    return {}


def selected_record_id(selected_rows: Optional[List[int]], data: Optional[List[dict]]) -> Optional[str]:
    if not selected_rows or not data:
        return None
    index = selected_rows[0]
    if not 0 <= index < len(data):
        return None
    return data[index].get("id")


def event_from_trigger(
        triggered_id: Any,
        *,
        search: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        sort_by: Optional[List[dict]] = None,
        page_size: Any = None,
        selected_rows: Optional[List[int]] = None,
        data: Optional[List[dict]] = None,
) -> TableEvent:
    """
    Translate the component that fired the table callback into a TableEvent.
    Anything unrecognised (including the initial call) is a plain render.
    """
    if not isinstance(triggered_id, dict):
        return TableEvent(EventKind.RENDER)

    kind = triggered_id.get("type")

    if kind == IDs.Pattern.SEARCH:
        return TableEvent(EventKind.SEARCH, search or "")
    if kind == IDs.Pattern.FILTER:
        dimension = triggered_id.get("dimension")
        return TableEvent(EventKind.FILTER, (dimension, (filters or {}).get(dimension)))
    if kind == IDs.Pattern.DATE_RANGE:
        # Half-open pickers are ignored until both ends are set or both cleared
        if bool(start_date) != bool(end_date):
            return TableEvent(EventKind.RENDER)
        return TableEvent(EventKind.DATE_RANGE, (start_date, end_date))
    if kind == IDs.Pattern.TABLE:
        if not sort_by:
            return TableEvent(EventKind.SORT, None)
        return TableEvent(EventKind.SORT, (sort_by[0].get("column_id"), sort_by[0].get("direction")))
    if kind == IDs.Pattern.PREVIOUS_PAGE:
        return TableEvent(EventKind.PREVIOUS_PAGE)
    if kind == IDs.Pattern.NEXT_PAGE:
        return TableEvent(EventKind.NEXT_PAGE)
    if kind == IDs.Pattern.PAGE_SIZE:
        return TableEvent(EventKind.PAGE_SIZE, page_size)
    if kind == IDs.Pattern.RELOAD_BTN:
        return TableEvent(EventKind.REFRESH)
    if kind == IDs.Pattern.DELETE_BTN:
        return TableEvent(EventKind.DELETE, selected_record_id(selected_rows, data))

    logger.debug("Unhandled trigger %r", triggered_id)
    return TableEvent(EventKind.RENDER)
