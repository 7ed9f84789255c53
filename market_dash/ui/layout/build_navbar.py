from __future__ import annotations

from typing import Optional

import dash_bootstrap_components as dbc
from dash import html

from market_dash.config.model import GlobalConfig
from market_dash.core.session import UserSession
from market_dash.ui.ids import IDs


def _user_block(session: Optional[UserSession]) -> html.Div:
    if session is None:
        return html.Div("Not signed in", className="text-muted")

    role = session.role_name.replace("_", " ").title()
    return html.Div(
        [
            html.Div(session.full_name or session.email, className="fw-semibold"),
            html.Small(role, className="text-muted"),
        ],
        className="d-flex flex-column text-end",
    )


def build_navbar(global_config: GlobalConfig, session: Optional[UserSession]) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                # Left: title
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(
                            global_config.subtitle,
                            className="text-muted",
                            id=IDs.Control.NAVBAR_SUBTITLE,
                        ),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),

                # Right: signed-in user
                html.Div(
                    _user_block(session),
                    id=IDs.Control.NAVBAR_USER,
                    className="ms-auto",
                    style={"marginRight": "24px"},
                ),
            ],
        ),
        dark=False,
        className="shadow-sm mdash-navbar",
    )
