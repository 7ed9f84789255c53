from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Tuple

from market_dash.config.model import GlobalConfig, ViewConfig
from market_dash.core.exceptions import ConfigError
from market_dash.core.table_state import PAGE_SIZES

logger = logging.getLogger(__name__)


def _parse_page_sizes(raw: Any) -> Tuple[int, ...]:
    if raw is None:
        return PAGE_SIZES
    try:
        sizes = tuple(sorted({int(size) for size in raw}))
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"page_sizes must be a list of integers, got {raw!r}") from e
    if not sizes or sizes[0] <= 0:
        raise ConfigError(f"page_sizes must be positive integers, got {raw!r}")
    return sizes


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout.

    Expected structure:

        root/
            global.json
            views/
                shops.json
                orders.json
                ...

    - ui_title / subtitle: navbar text
    - page_sizes: the enumerated page-size choices, defaults to 10/20/30/50/100
    - default_view: tab selected on load
    - data_root: directory holding <table>.json files; relative paths resolve against 'root'
      and MARKET_DASH_DATA_ROOT overrides it
    - session: the signed-in user the dashboard renders for

    A missing global.json falls back to defaults. View files that fail to parse
    are logged and skipped.
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raw_global: Dict[str, Any] = {}
    else:
        with global_path.open(encoding="utf-8") as f:
            raw_global = json.load(f)

    views_dir = root / "views"
    views: List[ViewConfig] = []

    if views_dir.is_dir():
        logger.info(f"Scanning for view configurations in: {views_dir}")
        files = sorted(views_dir.glob("*.json"))

        for idx, config_file in enumerate(files):
            # Ignore macOS 'Apple Double' files
            if config_file.name.startswith("._"):
                continue

            try:
                with config_file.open(encoding="utf-8") as f:
                    raw = json.load(f)
                views.append(ViewConfig.from_raw(raw, source_path=config_file, index=idx))
            except (OSError, ValueError, ConfigError) as e:
                logger.error(f"Failed to load {config_file.name}: {e}")
    else:
        logger.warning(f"Views directory not found at: {views_dir}")

    data_root_raw = os.environ.get("MARKET_DASH_DATA_ROOT") or raw_global.get("data_root")
    data_root = Path(data_root_raw) if data_root_raw else root / "data"
    if not data_root.is_absolute():
        data_root = (root / data_root).resolve()

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Marketplace Admin"),
        subtitle=raw_global.get("subtitle", "Shops, products and orders"),
        page_sizes=_parse_page_sizes(raw_global.get("page_sizes")),
        default_view=raw_global.get("default_view"),
        data_root=data_root,
        session=raw_global.get("session"),
        views=views,
    )


def load_view_registry(root: Path) -> Tuple[GlobalConfig, Dict[str, ViewConfig]]:
    """
    Load global config + view config mapping keyed by view id.
    Disabled views and duplicate ids are left out.
    """
    global_config = load_global_config(root)

    cfg_by_id: Dict[str, ViewConfig] = {}
    for view_cfg in global_config.views:
        if not view_cfg.enabled:
            logger.info(f"View disabled in config: {view_cfg.view_id}")
            continue
        if view_cfg.view_id in cfg_by_id:
            logger.warning(f"Duplicate view id ignored: {view_cfg.view_id}")
            continue
        cfg_by_id[view_cfg.view_id] = view_cfg

    return global_config, cfg_by_id
