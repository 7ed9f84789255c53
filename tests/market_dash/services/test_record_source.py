import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from market_dash.core.exceptions import FetchFailure, MutationFailure
from market_dash.services.record_source import JsonTableSource
from market_dash.services.storage import LocalFileSystemStorage


def _make_source(tmp_path, tables=None):
    for name, rows in (tables or {}).items():
        (tmp_path / f"{name}.json").write_text(json.dumps(rows), encoding="utf-8")
    return JsonTableSource(LocalFileSystemStorage(tmp_path))


def test_fetch_reads_json_array(tmp_path):
    source = _make_source(tmp_path, {"shops": [{"id": 1}, {"id": 2}]})
    assert source.fetch("shops") == [{"id": 1}, {"id": 2}]


def test_fetch_missing_or_malformed_table_raises_fetch_failure(tmp_path):
    source = _make_source(tmp_path, {"object": {"id": 1}})
    (tmp_path / "broken.json").write_text("[{", encoding="utf-8")

    with pytest.raises(FetchFailure):
        source.fetch("missing")
    with pytest.raises(FetchFailure):
        source.fetch("broken")
    with pytest.raises(FetchFailure):
        source.fetch("object")


def test_delete_rewrites_the_table(tmp_path):
    source = _make_source(tmp_path, {"shops": [{"id": 1}, {"id": 2}, {"id": 3}]})

    source.delete("shops", "2")

    assert source.fetch("shops") == [{"id": 1}, {"id": 3}]


def test_delete_unknown_id_raises_mutation_failure(tmp_path):
    source = _make_source(tmp_path, {"shops": [{"id": 1}]})

    with pytest.raises(MutationFailure):
        source.delete("shops", 42)
    with pytest.raises(MutationFailure):
        source.delete("missing", 1)


def test_storage_refuses_paths_outside_root(tmp_path):
    storage = LocalFileSystemStorage(tmp_path / "root")
    with pytest.raises(ValueError):
        storage.read_bytes("../secret.json")


def test_concurrent_deletes_all_persist(tmp_path):
    source = _make_source(tmp_path, {"shops": [{"id": i} for i in range(1, 41)]})

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: source.delete("shops", i), range(1, 31)))

    assert [row["id"] for row in source.fetch("shops")] == list(range(31, 41))


def test_writes_leave_no_temp_files_behind(tmp_path):
    storage = LocalFileSystemStorage(tmp_path)

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda i: storage.write_bytes("shops.json", f"[{i}]".encode()), range(20)))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["shops.json"]
    assert json.loads(storage.read_bytes("shops.json")) in [[i] for i in range(20)]
