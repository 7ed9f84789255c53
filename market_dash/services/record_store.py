from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from market_dash.config.model import ViewConfig
from market_dash.core.base_view import BaseTableView
from market_dash.core.exceptions import FetchFailure
from market_dash.core.records import Record, normalise_id
from market_dash.core.view_registry import ViewRegistry
from market_dash.services.record_source import RecordSource

logger = logging.getLogger(__name__)

Subscriber = Callable[[Tuple[Record, ...]], None]


class RecordStore:
    """
    Canonical record collection for one table view.

    The collection is an immutable tuple that is only ever replaced: a reload
    swaps in whatever the source returned, never merging with the previous
    rows. Rows are decoded through the view's schema and prepare_record hook
    once, here, so the pipeline only ever sees validated records.
    """

    def __init__(self, view: BaseTableView, source: RecordSource):
        self.view = view
        self.source = source
        self._records: Tuple[Record, ...] = ()
        self._subscribers: List[Subscriber] = []
        self.loaded = False
        self.last_error: Optional[str] = None

    @property
    def table(self) -> str:
        return self.view.table_name

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a 'collection replaced' listener; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def replace(self, rows: Iterable[Any]) -> Tuple[Record, ...]:
        decoded = self.view.schema.decode_all(rows)
        self._records = tuple(self.view.prepare_record(r) for r in decoded)
        for callback in list(self._subscribers):
            callback(self._records)
        return self._records

    def load(self) -> Tuple[Record, ...]:
        """
        Fetch the table and replace the collection. A failed fetch degrades to
        an empty collection and leaves the message in last_error for the UI.
        """
        try:
            rows = self.source.fetch(self.table)
        except FetchFailure as e:
            logger.error(
                "Failed to fetch table",
                extra={"view_id": self.view.id, "table": self.table, "error": str(e)},
            )
            self.last_error = f"Error fetching {self.view.label.lower()}"
            self.loaded = True
            return self.replace(())

        self.last_error = None
        self.loaded = True
        return self.replace(rows)

    def remove(self, record_id: Any) -> Tuple[Record, ...]:
        """
        Delete a record in the source, then replace the collection without it.
        MutationFailure from the source propagates to the caller.
        """
        self.source.delete(self.table, record_id)
        key = normalise_id(record_id)
        schema = self.view.schema
        return self.replace(r for r in self._records if schema.record_id(r) != key)


class RecordStoreManager(Mapping[str, RecordStore]):
    """
    One RecordStore per registered view, created and loaded lazily on first
    access. Implements the Mapping interface so the UI can treat it as a dict.
    """

    def __init__(
            self,
            registry: ViewRegistry,
            source: RecordSource,
            cfg_by_id: Optional[Dict[str, ViewConfig]] = None,
    ):
        self._registry = registry
        self._source = source
        self._cfg_by_id = cfg_by_id or {}
        self._stores: Dict[str, RecordStore] = {}

    def __getitem__(self, view_id: str) -> RecordStore:
        if view_id in self._stores:
            return self._stores[view_id]

        if view_id not in self._registry:
            raise KeyError(f"Unknown view '{view_id}'")

        # Stores are shared between sessions; the view only supplies schema + derivations
        view = self._registry.create(view_id, session=None, config=self._cfg_by_id.get(view_id))
        store = RecordStore(view, self._source)
        logger.info("Lazy-loading table", extra={"view_id": view_id, "table": store.table})
        store.load()
        self._stores[view_id] = store
        return store

    def __iter__(self) -> Iterator[str]:
        return iter(cls.id for cls in self._registry.all_classes())

    def __len__(self) -> int:
        return len(self._registry.all_classes())

    def is_loaded(self, view_id: str) -> bool:
        return view_id in self._stores

    def refresh(self, view_id: str) -> RecordStore:
        """Reload a store that already exists; first access loads anyway."""
        if view_id in self._stores:
            self._stores[view_id].load()
            return self._stores[view_id]
        return self[view_id]
