from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

import dash_bootstrap_components as dbc
from dash import dcc

from market_dash.core.base_view import BaseTableView
from market_dash.ui.ids import IDs
from market_dash.ui.layout.build_navbar import build_navbar
from market_dash.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from market_dash.ui.config import AppConfig

logger = logging.getLogger(__name__)


def visible_views(ctx: AppConfig) -> List[BaseTableView]:
    """Registered views the signed-in session passes the page guard for, in tab order."""
    views = []
    for view_cls in ctx.registry.all_classes():
        view = ctx.registry.create(view_cls.id, session=ctx.session, config=ctx.cfg_by_id.get(view_cls.id))
        if view.can_view():
            views.append(view)
    return views


def build_layout(ctx: AppConfig):
    """
    Built per page load, so dropdown options reflect the current record stores.
    """
    navbar = build_navbar(ctx.global_config, ctx.session)
    views = visible_views(ctx)

    if not views:
        body = dbc.Card(
            dbc.CardBody("You don't have access to any tables. Ask an administrator for access."),
            className="mt-3",
        )
        return dbc.Container(fluid=True, className="mdash-root", children=[navbar, body])

    default_view = ctx.global_config.default_view
    if default_view not in {v.id for v in views}:
        default_view = views[0].id

    page_sizes = ctx.table_service.page_sizes
    tabs = [
        dcc.Tab(
            label=view.label,
            value=view.id,
            children=[build_table_panel(view, ctx.stores[view.id].records, page_sizes)],
        )
        for view in views
    ]
    logger.debug("Built layout", extra={"views": [v.id for v in views]})

    return dbc.Container(
        fluid=True,
        className="mdash-root",
        children=[
            navbar,
            dcc.Tabs(
                id=IDs.Control.PAGE_TABS,
                value=default_view,
                children=tabs,
                className="mt-2",
                persistence=True,
                persistence_type="session",
            ),
        ],
    )
