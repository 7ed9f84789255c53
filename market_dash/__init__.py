"""
Top-level package for the marketplace admin dashboard.

This package exposes the core architecture (record pipeline, views, UI adapters).
Most code should import from submodules such as:
    market_dash.core
    market_dash.views
    market_dash.services
    market_dash.ui
"""

__all__: list[str] = []
