from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.sorting import infer_field_type, sort_records
from market_dash.core.table_state import SortDirection, SortState

SCHEMA = RecordSchema(
    sortable={
        "name": FieldType.TEXT,
        "price": FieldType.NUMBER,
        "created_at": FieldType.DATE,
        "rank": FieldType.NUMBER,
    }
)


def _ids(records):
    return [r["id"] for r in records]


def test_text_sort_puts_missing_values_first():
    records = [{"id": 1, "name": "b"}, {"id": 2}, {"id": 3, "name": "a"}]
    out = sort_records(records, SortState("name"), SCHEMA)
    assert _ids(out) == [2, 3, 1]


def test_number_sort_is_numeric_and_treats_missing_as_zero():
    records = [
        {"id": 1, "price": 100},
        {"id": 2, "price": "9.5"},
        {"id": 3, "price": None},
        {"id": 4, "price": 10},
    ]
    out = sort_records(records, SortState("price"), SCHEMA)
    assert _ids(out) == [3, 2, 4, 1]


def test_date_sort_orders_chronologically():
    records = [
        {"id": 1, "created_at": "2024-01-01"},
        {"id": 2, "created_at": "2024-03-01T00:00:00Z"},
        {"id": 3, "created_at": "2024-02-01"},
        {"id": 4, "created_at": "not a date"},
    ]
    out = sort_records(records, SortState("created_at"), SCHEMA)
    assert _ids(out) == [4, 1, 3, 2]


def test_descending_is_exact_reverse_of_ascending_including_ties():
    records = [
        {"id": 1, "rank": 1},
        {"id": 2, "rank": 1},
        {"id": 3, "rank": 0},
    ]
    asc = sort_records(records, SortState("rank"), SCHEMA)
    desc = sort_records(records, SortState("rank", SortDirection.DESC), SCHEMA)

    assert _ids(asc) == [3, 1, 2]
    # equal keys come out in reverse input order
    assert _ids(desc) == [2, 1, 3]
    assert desc == list(reversed(asc))


def test_sorting_an_already_sorted_list_is_a_no_op():
    records = [{"id": i, "rank": i // 2} for i in range(6)]
    out = sort_records(records, SortState("rank"), SCHEMA)
    assert out == records


def test_type_is_inferred_without_a_schema():
    numeric = [{"id": 1, "n": 10}, {"id": 2, "n": 9}, {"id": 3, "n": 100}]
    assert _ids(sort_records(numeric, SortState("n"))) == [2, 1, 3]

    text = [{"id": 1, "n": "10"}, {"id": 2, "n": "9"}]
    assert infer_field_type(text, "n") is FieldType.TEXT
    assert _ids(sort_records(text, SortState("n"))) == [1, 2]


def test_nested_path_is_sortable():
    records = [
        {"id": 1, "shops": {"shop_name": "Zeta"}},
        {"id": 2, "shops": {"shop_name": "Alpha"}},
    ]
    out = sort_records(records, SortState("shops.shop_name"))
    assert _ids(out) == [2, 1]


def test_sort_returns_new_list():
    records = [{"id": 2, "name": "b"}, {"id": 1, "name": "a"}]
    out = sort_records(records, SortState("name"), SCHEMA)
    assert _ids(records) == [2, 1]
    assert _ids(out) == [1, 2]
