from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from market_dash.core.exceptions import ConfigError
from market_dash.core.table_state import PAGE_SIZES, SortState


@dataclass
class ViewConfig:
    """
    Parsed config entry for a single table view.
    """
    raw: Dict[str, Any]
    source_path: Optional[Path]
    index: int
    default_sort: Optional[SortState] = None
    default_page_size: Optional[int] = None

    @property
    def view_id(self) -> str:
        if self.raw.get("view_id"):
            return str(self.raw["view_id"])
        if self.source_path is not None:
            return self.source_path.stem
        return f"view_{self.index}"

    @property
    def table(self) -> Optional[str]:
        return self.raw.get("table")

    @property
    def enabled(self) -> bool:
        return bool(self.raw.get("enabled", True))

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Optional[Path], index: int) -> ViewConfig:
        if not isinstance(raw, dict):
            raise ConfigError(f"View config at {source_path} must be a JSON object")
        cfg = cls(raw=raw, source_path=source_path, index=index)

        # Typed fields are parsed here so a malformed file is rejected at load time
        raw_sort = raw.get("default_sort")
        if raw_sort:
            try:
                cfg.default_sort = SortState.from_dict(raw_sort)
            except (AttributeError, TypeError, ValueError) as e:
                raise ConfigError(f"View '{cfg.view_id}': invalid default_sort {raw_sort!r}") from e

        size = raw.get("default_page_size")
        if size is not None:
            try:
                cfg.default_page_size = int(size)
            except (TypeError, ValueError, OverflowError) as e:
                raise ConfigError(f"View '{cfg.view_id}': invalid default_page_size {size!r}") from e
            if cfg.default_page_size <= 0:
                raise ConfigError(f"View '{cfg.view_id}': default_page_size must be positive, got {size!r}")
        return cfg


@dataclass
class GlobalConfig:
    ui_title: str = "Marketplace Admin"
    subtitle: str = "Shops, products and orders"
    page_sizes: Tuple[int, ...] = PAGE_SIZES
    default_view: Optional[str] = None
    data_root: Optional[Path] = None
    session: Optional[Dict[str, Any]] = None
    views: List[ViewConfig] = field(default_factory=list)
