from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import dash
from dash import ALL, MATCH, Input, Output, State

from market_dash.core.base_view import BaseTableView
from market_dash.core.exceptions import AccessDenied
from market_dash.ui.callbacks.callbacks_utils import event_from_trigger, filter_values
from market_dash.ui.helpers import error_alert, notice_alert, page_label, sort_by_value
from market_dash.ui.ids import IDs

if TYPE_CHECKING:
    from market_dash.ui.config import AppConfig

logger = logging.getLogger(__name__)

P = IDs.Pattern


def _id(kind: str) -> dict:
    return {"type": kind, "view": MATCH}


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Any table control -> pipeline event -> visible page
    # ---------------------------------------------------------
    @app.callback(
        Output(_id(P.TABLE), "data"),
        Output(_id(P.TABLE), "sort_by"),
        Output(_id(P.TABLE), "selected_rows"),
        Output(_id(P.STATE), "data"),
        Output(_id(P.SUMMARY_TEXT), "children"),
        Output(_id(P.PAGE_LABEL), "children"),
        Output(_id(P.PREVIOUS_PAGE), "disabled"),
        Output(_id(P.NEXT_PAGE), "disabled"),
        Output(_id(P.SUMMARY_CHART), "figure"),
        Output(_id(P.ALERT), "children"),
        Input(_id(P.SEARCH), "value"),
        Input({"type": P.FILTER, "view": MATCH, "dimension": ALL}, "value"),
        Input(_id(P.DATE_RANGE), "start_date"),
        Input(_id(P.DATE_RANGE), "end_date"),
        Input(_id(P.TABLE), "sort_by"),
        Input(_id(P.PREVIOUS_PAGE), "n_clicks"),
        Input(_id(P.NEXT_PAGE), "n_clicks"),
        Input(_id(P.PAGE_SIZE), "value"),
        Input(_id(P.RELOAD_BTN), "n_clicks"),
        Input(_id(P.DELETE_BTN), "n_clicks"),
        State(_id(P.TABLE), "selected_rows"),
        State(_id(P.TABLE), "data"),
        State(_id(P.STATE), "data"),
    )
    def update_table(
            search, _filter_values, start_date, end_date, sort_by,
            _prev, _next, page_size, _reload, _delete,
            selected_rows, data, state,
    ):
        view_id = dash.ctx.outputs_list[0]["id"]["view"]
        event = event_from_trigger(
            dash.ctx.triggered_id,
            search=search,
            filters=filter_values(dash.ctx.inputs_list),
            start_date=start_date,
            end_date=end_date,
            sort_by=sort_by,
            page_size=page_size,
            selected_rows=selected_rows,
            data=data,
        )

        try:
            response = ctx.table_service.handle(view_id, ctx.session, state, event)
        except AccessDenied as e:
            logger.warning("Access denied", extra={"view_id": view_id, "event": event.kind.value})
            return _unchanged(error_alert(str(e)))
        except Exception:
            logger.exception(
                "Error in update_table",
                extra={"view_id": view_id, "event": event.kind.value},
            )
            return _unchanged(error_alert("Something went wrong while loading this table."))

        display = response.display
        logger.info(
            "table_event",
            extra={
                "view_id": view_id,
                "event": event.kind.value,
                "n_filtered": display.total_records,
                "page": display.page,
            },
        )
        return (
            response.rows,
            sort_by_value(display),
            [],
            response.state,
            display.summary_text(),
            page_label(display),
            not display.has_previous,
            not display.has_next,
            response.summary_figure()
            if response.view.summary_field
            else BaseTableView.empty_figure(""),
            notice_alert(response.notice),
        )


def _unchanged(alert: Any) -> tuple:
    no = dash.no_update
    return no, no, no, no, no, no, no, no, no, alert
