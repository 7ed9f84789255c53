"""
Config package for market_dash.

Responsible for:
- config models (GlobalConfig, ViewConfig)
- config I/O helpers (load_global_config / load_view_registry)
"""

from .model import GlobalConfig, ViewConfig
from .config_loader import load_global_config, load_view_registry

__all__ = ["GlobalConfig", "ViewConfig", "load_global_config", "load_view_registry"]
