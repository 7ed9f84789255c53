from market_dash.core.pagination import paginate
from market_dash.core.table_state import PageState, total_pages


def _records(n):
    return [{"id": i} for i in range(1, n + 1)]


def test_paginate_slices_the_requested_page():
    result = paginate(_records(25), PageState(page=2, page_size=10))
    assert [r["id"] for r in result.records] == list(range(11, 21))
    assert result.total_records == 25


def test_last_page_can_be_short():
    result = paginate(_records(25), PageState(page=3, page_size=10))
    assert [r["id"] for r in result.records] == [21, 22, 23, 24, 25]


def test_page_past_the_end_is_empty_not_an_error():
    result = paginate(_records(5), PageState(page=4, page_size=10))
    assert result.records == ()
    assert result.total_records == 5


def test_total_pages():
    assert total_pages(0, 10) == 0
    assert total_pages(1, 10) == 1
    assert total_pages(10, 10) == 1
    assert total_pages(25, 10) == 3


def test_page_state_clamps_to_the_last_page():
    assert PageState(page=5, page_size=10).clamped(25).page == 3
    assert PageState(page=2, page_size=10).clamped(25).page == 2
    assert PageState(page=3, page_size=10).clamped(0).page == 1


def test_empty_collection():
    result = paginate([], PageState(page=1, page_size=10))
    assert result.records == ()
    assert result.total_records == 0
