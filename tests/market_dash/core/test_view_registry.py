import pytest

from market_dash.core.exceptions import RecordSchemaError
from market_dash.core.session import UserSession
from market_dash.core.table_state import SortDirection, SortState
from market_dash.core.view_registry import ViewRegistry
from market_dash.views import OrdersView, ShopsView


def test_register_and_create_binds_session():
    registry = ViewRegistry()
    registry.register(ShopsView)
    session = UserSession(user_id="u-1")

    view = registry.create("shops", session=session)

    assert isinstance(view, ShopsView)
    assert view.session is session
    assert "shops" in registry
    assert registry.get_class("shops") is ShopsView


def test_register_rejects_non_views_and_duplicates():
    registry = ViewRegistry()
    registry.register(OrdersView)

    with pytest.raises(TypeError):
        registry.register(dict)
    with pytest.raises(ValueError):
        registry.register(OrdersView)


def test_unknown_view_raises_key_error():
    registry = ViewRegistry()
    with pytest.raises(KeyError):
        registry.create("missing")
    with pytest.raises(KeyError):
        registry.get_class("missing")


def test_all_classes_keeps_registration_order():
    registry = ViewRegistry()
    registry.register(ShopsView)
    registry.register(OrdersView)
    assert [cls.id for cls in registry.all_classes()] == ["shops", "orders"]


def test_register_rejects_inconsistent_schema():
    class BrokenSortView(ShopsView):
        id = "broken_sort"
        default_sort = SortState("nope", SortDirection.ASC)

    class BrokenLabelsView(ShopsView):
        id = "broken_labels"
        dimension_labels = {"colour": ("Colour", None)}

    registry = ViewRegistry()
    with pytest.raises(RecordSchemaError):
        registry.register(BrokenSortView)
    with pytest.raises(RecordSchemaError):
        registry.register(BrokenLabelsView)
    assert "broken_sort" not in registry
