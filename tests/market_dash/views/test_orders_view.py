from market_dash.core.filter_state import FilterState
from market_dash.core.filtering import filter_records
from market_dash.views.orders_view import OrdersView, delivery_type, parse_json_field


def _make_order(**overrides):
    order = {
        "id": 5001,
        "created_at": "2024-04-10T08:12:00Z",
        "status": "Active",
        "confirmed": True,
        "shipping_method": '"delivery"',
        "shipping_address": '{"name": "Noa Peretz", "city": "Haifa"}',
        "products": {"title": "Trail Tent", "price": 199.0, "shop": 1, "shops": [{"shop_name": "Acme"}]},
        "delivery_methods": {"price": 25.0},
        "delivery_location_methods": {"price_addition": 10.0},
        "selected_features": [{"price_addition": 5.0}],
    }
    order.update(overrides)
    return order


def test_prepare_record_derives_display_fields():
    record = OrdersView().prepare_record(_make_order())

    assert record["name"] == "Trail Tent"
    assert record["buyer"] == "Noa Peretz"
    assert record["shop"] == 1
    assert record["shop_name"] == "Acme"
    assert record["city"] == "Haifa"
    assert record["status"] == "processing"
    assert record["delivery_status"] == "preparing"
    assert record["delivery_type"] == "delivery"
    assert record["total"] == 239.0
    assert record["total_text"] == "$239.00"
    assert record["has_additions"] is True


def test_stored_total_wins_over_recomputing():
    record = OrdersView().prepare_record(_make_order(total=500))
    assert record["total"] == 500
    assert record["total_text"] == "$500.00"


def test_fallbacks_for_missing_joins():
    record = OrdersView().prepare_record({"id": 1, "status": "Weird", "shipping_address": "not json"})

    assert record["name"] == "Product"
    assert record["buyer"] == "Unknown Customer"
    assert record["shop_name"] == "Unknown Shop"
    assert record["city"] == "Unknown City"
    assert record["status"] == "processing"
    assert record["delivery_status"] == "pending"
    assert record["delivery_type"] == "pickup"
    assert record["total"] == 0.0


def test_search_covers_buyer_city_and_total():
    view = OrdersView()
    records = [
        view.prepare_record(_make_order()),
        view.prepare_record(_make_order(id=5002, shipping_address={"name": "Eli", "city": "Eilat"}, total=12)),
    ]

    def search(text):
        return [r["id"] for r in filter_records(records, FilterState(search_text=text), view.schema)]

    assert search("noa") == [5001]
    assert search("eilat") == [5002]
    assert search("$239") == [5001]
    assert search("preparing") == [5001, 5002]


def test_status_and_delivery_type_filters():
    view = OrdersView()
    records = [
        view.prepare_record(_make_order()),
        view.prepare_record(_make_order(id=2, status="Completed", shipping_method="pickup")),
    ]
    state = FilterState(structural_filters={"status": {"completed"}})
    assert [r["id"] for r in filter_records(records, state, view.schema)] == [2]

    state = FilterState(structural_filters={"delivery_type": {"delivery"}})
    assert [r["id"] for r in filter_records(records, state, view.schema)] == [5001]


def test_helpers():
    assert parse_json_field({"city": "Haifa"}) == {"city": "Haifa"}
    assert parse_json_field("[1, 2]") == {}
    assert parse_json_field(None) == {}
    assert delivery_type("delivery") == "delivery"
    assert delivery_type('"delivery"') == "delivery"
    assert delivery_type(None) == "pickup"
