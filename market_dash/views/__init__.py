from .categories_view import CategoriesView
from .deliveries_view import DeliveriesView
from .licenses_view import LicensesView
from .orders_view import OrdersView
from .products_view import ProductsView
from .shops_view import ShopsView
from .subscriptions_view import SubscriptionsView
from .users_view import UsersView

# Tab order of the dashboard
ALL_VIEWS = (
    ShopsView,
    ProductsView,
    CategoriesView,
    OrdersView,
    DeliveriesView,
    LicensesView,
    SubscriptionsView,
    UsersView,
)

__all__ = [
    "ALL_VIEWS",
    "CategoriesView",
    "DeliveriesView",
    "LicensesView",
    "OrdersView",
    "ProductsView",
    "ShopsView",
    "SubscriptionsView",
    "UsersView",
]
