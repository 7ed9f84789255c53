from __future__ import annotations

from typing import Any, Dict, List, Optional

import dash_bootstrap_components as dbc

from market_dash.core.base_view import BaseTableView
from market_dash.core.pipeline import DisplaySlice
from market_dash.services.table_service import Notice


def table_columns(view: BaseTableView) -> List[Dict[str, Any]]:
    """
    DataTable column definitions. Sorting is driven by the pipeline, which
    ignores header clicks on columns the view doesn't sort on.
    """
    return [{"name": column.title, "id": column.accessor} for column in view.columns()]


def page_label(display: DisplaySlice) -> str:
    if display.total_pages == 0:
        return "Page 0 of 0"
    return f"Page {display.page} of {display.total_pages}"


def sort_by_value(display: DisplaySlice) -> List[Dict[str, str]]:
    """Reflect the pipeline's sort back onto the DataTable header arrows."""
    sort = display.sort_state
    return [{"column_id": sort.field, "direction": sort.direction.value}]


def notice_alert(notice: Optional[Notice]):
    if notice is None:
        return None
    return dbc.Alert(
        notice.message,
        color=notice.kind,
        dismissable=True,
        duration=4000 if notice.kind == "success" else None,
        className="mb-2",
    )


def error_alert(message: str):
    return dbc.Alert(message, color="danger", dismissable=True, className="mb-2")
