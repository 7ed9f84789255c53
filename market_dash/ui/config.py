from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from market_dash.config.model import GlobalConfig, ViewConfig
from market_dash.core.session import UserSession
from market_dash.core.view_registry import ViewRegistry
from market_dash.services.record_store import RecordStoreManager
from market_dash.services.table_service import TableService


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    cfg_by_id: Dict[str, ViewConfig] = field(default_factory=dict)

    registry: Optional[ViewRegistry] = None
    stores: Optional[RecordStoreManager] = None
    table_service: Optional[TableService] = None
    session: Optional[UserSession] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.stores is None:
            raise RuntimeError("AppConfig.stores must be initialized.")
        if self.table_service is None:
            raise RuntimeError("AppConfig.table_service must be initialized.")
