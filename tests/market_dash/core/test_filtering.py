from market_dash.core.filter_state import FilterState
from market_dash.core.filtering import filter_records, matches_search
from market_dash.core.record_schema import RecordSchema


def _make_schema(date_field="created_at"):
    return RecordSchema(
        searchable=("name", "owners.full_name"),
        dimensions={"shop": "shop_id", "category": "category_ids"},
        date_field=date_field,
    )


def _make_records():
    return [
        {
            "id": 1,
            "name": "Acme Shop",
            "owners": [{"full_name": "Dana Levi"}],
            "shop_id": 1,
            "category_ids": [1, 2],
            "created_at": "2024-01-01T10:00:00Z",
        },
        {
            "id": 2,
            "name": "Best Shop",
            "owners": [{"full_name": "Omar Haddad"}],
            "shop_id": "2",
            "category_ids": [2],
            "created_at": "2024-03-01",
        },
        {
            "id": 3,
            "name": "acme two",
            "shop_id": 1.0,
            "created_at": "2024-02-01T23:30:00Z",
        },
    ]


def _ids(records):
    return [r["id"] for r in records]


def test_search_is_case_insensitive_substring():
    out = filter_records(_make_records(), FilterState(search_text="ACME"), _make_schema())
    assert _ids(out) == [1, 3]


def test_search_reaches_into_nested_lists():
    out = filter_records(_make_records(), FilterState(search_text="omar"), _make_schema())
    assert _ids(out) == [2]


def test_empty_search_keeps_everything_in_order():
    out = filter_records(_make_records(), FilterState(), _make_schema())
    assert _ids(out) == [1, 2, 3]


def test_missing_searchable_field_never_matches():
    record = {"id": 9}
    assert matches_search(record, "anything", _make_schema()) is False
    assert matches_search(record, "", _make_schema()) is True


def test_dimension_compares_normalised_ids():
    state = FilterState(structural_filters={"shop": {"1"}})
    out = filter_records(_make_records(), state, _make_schema())
    # shop_id 1 and 1.0 both count as "1"
    assert _ids(out) == [1, 3]


def test_dimension_over_a_list_field_matches_any_element():
    state = FilterState(structural_filters={"category": {"2"}})
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1, 2]


def test_dimensions_are_combined_with_and():
    state = FilterState(structural_filters={"shop": {"1"}, "category": {"2"}})
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1]


def test_empty_dimension_set_does_not_filter():
    state = FilterState(structural_filters={"shop": set()})
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1, 2, 3]


def test_unknown_dimension_is_ignored():
    state = FilterState(structural_filters={"warehouse": {"7"}})
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1, 2, 3]


def test_date_only_end_bound_covers_the_whole_day():
    state = FilterState(date_range=("2024-01-01", "2024-02-01"))
    out = filter_records(_make_records(), state, _make_schema())
    # id 3 is late on Feb 1st and still inside the range
    assert _ids(out) == [1, 3]


def test_date_range_with_time_end_bound_is_inclusive_of_that_instant():
    state = FilterState(date_range=("2024-01-01", "2024-02-01T23:30:00Z"))
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1, 3]

    state = FilterState(date_range=("2024-01-01", "2024-02-01T23:29:59Z"))
    out = filter_records(_make_records(), state, _make_schema())
    assert _ids(out) == [1]


def test_records_without_a_date_are_excluded_by_an_active_range():
    records = _make_records() + [{"id": 4, "name": "Undated"}]
    state = FilterState(date_range=("2020-01-01", "2030-01-01"))
    out = filter_records(records, state, _make_schema())
    assert 4 not in _ids(out)


def test_date_range_is_ignored_for_views_without_a_date_field():
    state = FilterState(date_range=("2030-01-01", "2030-12-31"))
    out = filter_records(_make_records(), state, _make_schema(date_field=None))
    assert _ids(out) == [1, 2, 3]


def test_filtering_is_idempotent_and_does_not_mutate_input():
    records = _make_records()
    before = [dict(r) for r in records]
    state = FilterState(search_text="shop", structural_filters={"category": {"2"}})

    once = filter_records(records, state, _make_schema())
    twice = filter_records(once, state, _make_schema())

    assert once == twice
    assert records == before
