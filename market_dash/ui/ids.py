from __future__ import annotations

__all__ = ["IDs", "view_component_id", "filter_id"]


class IDs:
    class Control:
        PAGE_TABS = "page-tabs"
        NAVBAR_SUBTITLE = "navbar-subtitle"
        NAVBAR_USER = "navbar-user"

    class Pattern:
        # pattern-matching "type" strings, keyed by {"view": <view id>}
        SEARCH = "table-search"
        FILTER = "table-filter"
        DATE_RANGE = "table-date-range"
        TABLE = "records-table"
        PAGE_SIZE = "table-page-size"
        PAGE_LABEL = "table-page-label"
        PREVIOUS_PAGE = "table-prev"
        NEXT_PAGE = "table-next"
        SUMMARY_TEXT = "table-summary-text"
        SUMMARY_CHART = "table-summary-chart"
        ALERT = "table-alert"
        RELOAD_BTN = "table-reload-btn"
        DELETE_BTN = "table-delete-btn"
        EXPORT_CSV_BTN = "table-export-csv-btn"
        EXPORT_JSON_BTN = "table-export-json-btn"
        DOWNLOAD = "table-download"
        STATE = "table-state"


def view_component_id(kind: str, view_id: str) -> dict:
    return {"type": kind, "view": view_id}


def filter_id(view_id: str, dimension: str) -> dict:
    return {"type": IDs.Pattern.FILTER, "view": view_id, "dimension": dimension}
