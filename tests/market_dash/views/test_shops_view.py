import pandas as pd
import plotly.graph_objs as go

from market_dash.core.session import SUPER_ADMIN, ShopMembership, UserSession
from market_dash.views import ProductsView, ShopsView


def _make_shops():
    return [
        {
            "id": 1,
            "shop_name": "Acme Outfitters",
            "status": "approved",
            "active": True,
            "category_shop_id": 2,
            "categories_shop": {"title": "Sports"},
            "shop_owners": [{"profiles": {"full_name": "Dana"}}, {"profiles": {"full_name": "Omar"}}],
            "created_at": "2024-01-10T09:30:00Z",
        },
        {
            "id": 2,
            "shop_name": "Blue Door",
            "status": "pending",
            "active": False,
            "category_shop_id": 1,
            "categories_shop": {"title": "Food"},
            "created_at": "2024-02-03T07:15:00Z",
        },
        {"id": 3, "shop_name": "Pixel", "status": "approved", "category_shop_id": 2, "categories_shop": {"title": "Sports"}},
    ]


def test_rows_render_display_values():
    rows = ShopsView().to_rows(_make_shops()[:2])

    assert rows[0]["id"] == "1"
    assert rows[0]["shop_owners.profiles.full_name"] == "Dana, Omar"
    assert rows[0]["active"] == "Active"
    assert rows[1]["active"] == "Inactive"
    assert rows[0]["created_at"] == "2024-01-10"
    assert rows[1]["shop_owners.profiles.full_name"] == ""


def test_scope_records_by_session():
    shops = _make_shops()
    admin = ShopsView(session=UserSession(user_id="a", role_name=SUPER_ADMIN))
    owner = ShopsView(session=UserSession(user_id="o", role_name="shop_owner", shops=(ShopMembership("2"),)))
    nobody = ShopsView(session=None)

    assert len(admin.scope_records(shops)) == 3
    assert [s["id"] for s in owner.scope_records(shops)] == [2]
    assert nobody.scope_records(shops) == ()


def test_dimension_options_are_distinct_and_sorted_by_label():
    options = ShopsView().dimension_options(_make_shops(), "category")
    assert options == [
        {"label": "Food", "value": "1"},
        {"label": "Sports", "value": "2"},
    ]
    assert ShopsView().dimension_options(_make_shops(), "nope") == []


def test_summary_counts_by_status():
    view = ShopsView()
    counts = view.compute_summary(_make_shops())

    assert isinstance(counts, pd.DataFrame)
    assert dict(zip(counts["value"], counts["count"])) == {"approved": 2, "pending": 1}

    fig = view.render_summary(counts)
    assert isinstance(fig, go.Figure)
    assert fig.layout.title.text == "Shops: 3 by status"


def test_summary_of_nothing_is_an_empty_figure():
    view = ShopsView()
    fig = view.render_summary(view.compute_summary([]))
    assert fig.layout.title.text == "No records match the current filters"


def test_only_admins_delete():
    assert ShopsView(session=UserSession(user_id="a", role_name=SUPER_ADMIN)).can_delete()
    assert not ShopsView(session=UserSession(user_id="o", role_name="shop_owner")).can_delete()


def test_sortable_fields_follow_columns_and_schema():
    fields = ProductsView().sortable_fields()
    assert "price" in fields
    assert "categories_sub.title" not in fields
    assert "active" not in fields
