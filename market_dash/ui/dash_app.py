from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from market_dash.config.config_loader import load_view_registry
from market_dash.core.session import UserSession
from market_dash.core.view_registry import ViewRegistry
from market_dash.services.export_service import ExportService
from market_dash.services.record_source import JsonTableSource
from market_dash.services.record_store import RecordStoreManager
from market_dash.services.storage import LocalFileSystemStorage
from market_dash.services.table_service import TableService
from market_dash.ui.callbacks.callbacks_export import register_export_callbacks
from market_dash.ui.callbacks.callbacks_table import register_table_callbacks
from market_dash.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def _build_view_registry(disabled: Iterable[str] = ()) -> ViewRegistry:
    from market_dash.views import ALL_VIEWS

    disabled = set(disabled)
    registry = ViewRegistry()
    for view_cls in ALL_VIEWS:
        if view_cls.id in disabled:
            continue
        registry.register(view_cls)
    return registry


def create_dash_app(config_root: Optional[Path | str] = None) -> Dash:
    if config_root is None:
        config_root = os.getenv("MARKET_DASH_CONFIG_ROOT", "config")
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_id = load_view_registry(config_root)
    disabled = [cfg.view_id for cfg in global_config.views if not cfg.enabled]
    registry = _build_view_registry(disabled)
    if not registry.all_classes():
        raise RuntimeError("Every view is disabled in config")

    # 2) Initialize Service Layer
    storage_backend = LocalFileSystemStorage(global_config.data_root)
    stores = RecordStoreManager(registry, JsonTableSource(storage_backend), cfg_by_id)
    table_service = TableService(
        registry=registry,
        stores=stores,
        cfg_by_id=cfg_by_id,
        page_sizes=global_config.page_sizes,
        export_service=ExportService(),
    )

    # 3) Signed-in user
    session = UserSession.from_dict(global_config.session) if global_config.session else None
    if session is None:
        logger.warning("No session configured; every table will be hidden")

    # 4) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        cfg_by_id=cfg_by_id,
        registry=registry,
        stores=stores,
        table_service=table_service,
        session=session,
    )
    ctx.validate()

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = global_config.ui_title

    # A function, so each page load sees the current record stores
    app.layout = lambda: build_layout(ctx)

    register_table_callbacks(app, ctx)
    register_export_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={
            "config_root": str(config_root),
            "views": [cls.id for cls in registry.all_classes()],
            "data_root": str(global_config.data_root),
        },
    )
    return app
