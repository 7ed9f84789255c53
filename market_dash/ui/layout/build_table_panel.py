from __future__ import annotations

from typing import Iterable, Sequence

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from market_dash.core.base_view import BaseTableView
from market_dash.core.records import Record
from market_dash.ui.helpers import table_columns
from market_dash.ui.ids import IDs, filter_id, view_component_id

_FONT = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'


def _filter_controls(view: BaseTableView, records: Sequence[Record]) -> list:
    controls = []
    for dimension in view.schema.dimensions:
        title, _ = view.dimension_labels.get(dimension, (dimension.replace("_", " ").title(), None))
        controls.append(
            dbc.Col(
                [
                    html.Label(title, className="form-label"),
                    dcc.Dropdown(
                        id=filter_id(view.id, dimension),
                        options=view.dimension_options(records, dimension),
                        multi=True,
                        placeholder=f"All {title.lower()}",
                        persistence=True,
                        persistence_type="session",
                    ),
                ],
                md=3,
            )
        )
    return controls


def _date_range_control(view: BaseTableView) -> dbc.Col:
    # Always rendered so the table callback can list it as an input
    return dbc.Col(
        [
            html.Label("Date range", className="form-label"),
            dcc.DatePickerRange(
                id=view_component_id(IDs.Pattern.DATE_RANGE, view.id),
                clearable=True,
                display_format="YYYY-MM-DD",
                persistence=True,
                persistence_type="session",
            ),
        ],
        md=4,
        style={} if view.schema.date_field else {"display": "none"},
    )


def _toolbar(view: BaseTableView) -> html.Div:
    return html.Div(
        [
            dbc.Button("Reload", id=view_component_id(IDs.Pattern.RELOAD_BTN, view.id),
                       color="secondary", size="sm", className="me-2"),
            dbc.Button(
                f"Delete selected {view.record_label.lower()}",
                id=view_component_id(IDs.Pattern.DELETE_BTN, view.id),
                color="danger",
                size="sm",
                className="me-2",
                disabled=not view.can_delete(),
                style={} if view.can_delete() else {"display": "none"},
            ),
            dbc.Button("Export CSV", id=view_component_id(IDs.Pattern.EXPORT_CSV_BTN, view.id),
                       color="secondary", outline=True, size="sm", className="me-2"),
            dbc.Button("Export JSON", id=view_component_id(IDs.Pattern.EXPORT_JSON_BTN, view.id),
                       color="secondary", outline=True, size="sm"),
            dcc.Download(id=view_component_id(IDs.Pattern.DOWNLOAD, view.id)),
        ],
        className="d-flex justify-content-end align-items-center",
    )


def _pager(view: BaseTableView, page_sizes: Sequence[int]) -> html.Div:
    default_size = view.initial_page_size()
    if default_size not in page_sizes:
        default_size = page_sizes[0]

    return html.Div(
        [
            html.Span(id=view_component_id(IDs.Pattern.SUMMARY_TEXT, view.id), className="text-muted me-auto"),
            dcc.Dropdown(
                id=view_component_id(IDs.Pattern.PAGE_SIZE, view.id),
                options=[{"label": f"{size} / page", "value": size} for size in page_sizes],
                value=default_size,
                clearable=False,
                persistence=True,
                persistence_type="session",
                style={"width": "130px"},
                className="me-3",
            ),
            dbc.Button("Previous", id=view_component_id(IDs.Pattern.PREVIOUS_PAGE, view.id),
                       size="sm", color="light", className="me-2"),
            html.Span(id=view_component_id(IDs.Pattern.PAGE_LABEL, view.id), className="me-2"),
            dbc.Button("Next", id=view_component_id(IDs.Pattern.NEXT_PAGE, view.id),
                       size="sm", color="light"),
        ],
        className="d-flex align-items-center mt-2",
    )


def build_table_panel(view: BaseTableView, records: Iterable[Record], page_sizes: Sequence[int]) -> dbc.Card:
    """
    Search box, filter dropdowns, the records table, pager and summary chart
    for one view. Every component id carries the view id so one set of
    pattern-matching callbacks serves all tabs.
    """
    scoped = view.scope_records(records)

    chart = dcc.Graph(
        id=view_component_id(IDs.Pattern.SUMMARY_CHART, view.id),
        config={"displayModeBar": False},
        style={} if view.summary_field else {"display": "none"},
    )

    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [html.Strong(view.label), _toolbar(view)],
                    className="d-flex justify-content-between align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dcc.Store(id=view_component_id(IDs.Pattern.STATE, view.id), storage_type="session"),
                    html.Div(id=view_component_id(IDs.Pattern.ALERT, view.id)),
                    dbc.Row(
                        [
                            dbc.Col(
                                [
                                    html.Label("Search", className="form-label"),
                                    dbc.Input(
                                        id=view_component_id(IDs.Pattern.SEARCH, view.id),
                                        type="search",
                                        placeholder="Search...",
                                        debounce=True,
                                        persistence=True,
                                        persistence_type="session",
                                    ),
                                ],
                                md=3,
                            ),
                            *_filter_controls(view, scoped),
                            _date_range_control(view),
                        ],
                        className="g-3 mb-3",
                    ),
                    dcc.Loading(
                        type="default",
                        children=dash_table.DataTable(
                            id=view_component_id(IDs.Pattern.TABLE, view.id),
                            columns=table_columns(view),
                            data=[],
                            sort_action="custom",
                            sort_mode="single",
                            sort_by=[],
                            row_selectable="single" if view.can_delete() else False,
                            selected_rows=[],
                            style_table={"overflowX": "auto"},
                            style_as_list_view=True,
                            style_cell={
                                "fontFamily": _FONT,
                                "fontSize": "13px",
                                "padding": "6px 8px",
                                "border": "none",
                                "textAlign": "left",
                                "maxWidth": "280px",
                                "whiteSpace": "nowrap",
                                "overflow": "hidden",
                                "textOverflow": "ellipsis",
                            },
                            style_header={
                                "fontFamily": _FONT,
                                "fontWeight": "600",
                                "backgroundColor": "#f3f4f6",
                                "borderBottom": "1px solid #e5e7eb",
                            },
                            style_data={"borderBottom": "1px solid #e5e7eb"},
                        ),
                    ),
                    _pager(view, page_sizes),
                    chart,
                ]
            ),
        ],
        className="mdash-maincard mt-3",
    )
