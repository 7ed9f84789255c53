from market_dash.core.pipeline import DisplaySlice
from market_dash.core.table_state import SortDirection, SortState
from market_dash.services.table_service import Notice
from market_dash.ui.helpers import notice_alert, page_label, sort_by_value, table_columns
from market_dash.views import OrdersView


def _slice(records, total, page=1, size=10, pages=None):
    return DisplaySlice(
        records=tuple(records),
        total_records=total,
        page=page,
        page_size=size,
        total_pages=pages if pages is not None else -(-total // size),
        sort_state=SortState("created_at", SortDirection.DESC),
    )


def test_page_label_and_empty_table():
    assert page_label(_slice([], 0, pages=0)) == "Page 0 of 0"
    assert page_label(_slice([{"id": 1}], 25, page=3)) == "Page 3 of 3"


def test_sort_by_mirrors_pipeline_sort():
    assert sort_by_value(_slice([], 0)) == [{"column_id": "created_at", "direction": "desc"}]


def test_table_columns_use_titles():
    columns = table_columns(OrdersView())
    assert columns[0] == {"name": "Order", "id": "id"}
    assert {"name": "Customer", "id": "buyer"} in columns


def test_notice_alert():
    assert notice_alert(None) is None

    success = notice_alert(Notice("Shop deleted successfully"))
    assert success.color == "success"
    assert success.duration == 4000

    failure = notice_alert(Notice("Error deleting record: boom", "danger"))
    assert failure.color == "danger"
    assert getattr(failure, "duration", None) is None
