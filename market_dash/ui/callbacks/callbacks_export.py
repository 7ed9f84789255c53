from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import MATCH, Input, Output, State, dcc, exceptions

from market_dash.core.exceptions import AccessDenied
from market_dash.ui.ids import IDs

if TYPE_CHECKING:
    from market_dash.ui.config import AppConfig

logger = logging.getLogger(__name__)

P = IDs.Pattern


def register_export_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output({"type": P.DOWNLOAD, "view": MATCH}, "data"),
        Input({"type": P.EXPORT_CSV_BTN, "view": MATCH}, "n_clicks"),
        Input({"type": P.EXPORT_JSON_BTN, "view": MATCH}, "n_clicks"),
        State({"type": P.STATE, "view": MATCH}, "data"),
        prevent_initial_call=True,
    )
    def export_filtered_records(_csv_clicks, _json_clicks, state):
        """Download the whole filtered + sorted collection, not just the visible page."""
        triggered = dash.ctx.triggered_id
        if not isinstance(triggered, dict):
            raise exceptions.PreventUpdate

        fmt = "json" if triggered.get("type") == P.EXPORT_JSON_BTN else "csv"
        view_id = triggered["view"]

        try:
            content, filename = ctx.table_service.export(view_id, ctx.session, state, fmt)
        except AccessDenied:
            logger.warning("Export denied", extra={"view_id": view_id})
            raise exceptions.PreventUpdate

        logger.info("export", extra={"view_id": view_id, "format": fmt, "filename": filename})
        return dcc.send_bytes(content, filename)
