from typing import Any, Dict, List

import pytest

from market_dash.core.exceptions import FetchFailure, MutationFailure
from market_dash.core.view_registry import ViewRegistry
from market_dash.services.record_source import RecordSource
from market_dash.services.record_store import RecordStore, RecordStoreManager
from market_dash.views import OrdersView, ShopsView


class _FakeSource(RecordSource):
    def __init__(self, tables: Dict[str, List[Any]]):
        self.tables = tables
        self.fetches: List[str] = []
        self.deleted: List[Any] = []
        self.fail_fetch = False
        self.fail_delete = False

    def fetch(self, table):
        self.fetches.append(table)
        if self.fail_fetch:
            raise FetchFailure("backend down")
        return list(self.tables.get(table, []))

    def delete(self, table, record_id):
        if self.fail_delete:
            raise MutationFailure("row is referenced")
        self.deleted.append((table, record_id))


def _make_shops():
    return [
        {"id": 1, "shop_name": "Acme"},
        {"id": 2, "shop_name": "Best"},
        {"shop_name": "no id"},
        "not a row",
    ]


def test_load_decodes_and_drops_malformed_rows():
    store = RecordStore(ShopsView(), _FakeSource({"shops": _make_shops()}))

    records = store.load()

    assert [r["id"] for r in records] == [1, 2]
    assert store.loaded is True
    assert store.last_error is None


def test_replace_never_merges():
    store = RecordStore(ShopsView(), _FakeSource({}))
    store.replace([{"id": 1}, {"id": 2}])
    store.replace([{"id": 3}])
    assert [r["id"] for r in store.records] == [3]


def test_subscribers_see_each_replacement_until_unsubscribed():
    store = RecordStore(ShopsView(), _FakeSource({}))
    seen = []
    unsubscribe = store.subscribe(lambda records: seen.append(len(records)))

    store.replace([{"id": 1}, {"id": 2}])
    unsubscribe()
    store.replace([{"id": 3}])

    assert seen == [2]


def test_fetch_failure_degrades_to_empty_with_message():
    source = _FakeSource({"shops": _make_shops()})
    store = RecordStore(ShopsView(), source)
    store.load()

    source.fail_fetch = True
    records = store.load()

    assert records == ()
    assert store.last_error == "Error fetching shops"


def test_load_applies_view_derivations():
    orders = [{"id": 7, "status": "Shipped", "products": {"title": "Tent", "price": 10}}]
    store = RecordStore(OrdersView(), _FakeSource({"orders": orders}))

    (record,) = store.load()

    assert record["status"] == "on_the_way"
    assert record["total"] == 10.0
    # the source rows are copied, not mutated
    assert orders[0]["status"] == "Shipped"


def test_remove_deletes_in_source_then_replaces():
    source = _FakeSource({"shops": _make_shops()})
    store = RecordStore(ShopsView(), source)
    store.load()

    store.remove("1")

    assert source.deleted == [("shops", "1")]
    assert [r["id"] for r in store.records] == [2]


def test_remove_failure_keeps_records():
    source = _FakeSource({"shops": _make_shops()})
    store = RecordStore(ShopsView(), source)
    store.load()
    source.fail_delete = True

    with pytest.raises(MutationFailure):
        store.remove(1)
    assert len(store.records) == 2


def test_manager_loads_lazily_and_refreshes():
    registry = ViewRegistry()
    registry.register(ShopsView)
    registry.register(OrdersView)
    source = _FakeSource({"shops": _make_shops(), "orders": []})
    stores = RecordStoreManager(registry, source)

    assert source.fetches == []
    assert not stores.is_loaded("shops")

    first = stores["shops"]
    again = stores["shops"]
    assert first is again
    assert source.fetches == ["shops"]

    stores.refresh("shops")
    assert source.fetches == ["shops", "shops"]

    stores.refresh("orders")
    assert source.fetches == ["shops", "shops", "orders"]

    assert sorted(stores) == ["orders", "shops"]
    assert len(stores) == 2
    with pytest.raises(KeyError):
        stores["missing"]
