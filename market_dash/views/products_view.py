from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.records import first_value
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_currency, format_date


def _price_cell(record) -> str:
    price = format_currency(record.get("price"))
    if record.get("onsale") and record.get("sale_price") is not None:
        return f"{format_currency(record.get('sale_price'))} (was {price})"
    return price


class ProductsView(BaseTableView):
    """
    Product catalogue across shops.

    Filterable by shop, category and subcategory; the summary chart counts
    products per category.
    """

    id = "products"
    label = "Products"
    record_label = "Product"
    table = "products"
    schema = RecordSchema(
        searchable=(
            "title",
            "desc",
            "shops.shop_name",
            "categories.title",
            "categories_sub.title",
        ),
        sortable={
            "title": FieldType.TEXT,
            "shops.shop_name": FieldType.TEXT,
            "categories.title": FieldType.TEXT,
            "price": FieldType.NUMBER,
            "created_at": FieldType.DATE,
        },
        dimensions={
            "shop": "shop",
            "category": "category",
            "subcategory": "subcategory_id",
        },
        shop_field="shop",
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)
    dimension_labels = {
        "shop": ("Shop", "shops.shop_name"),
        "category": ("Category", "categories.title"),
        "subcategory": ("Subcategory", "categories_sub.title"),
    }
    summary_field = "categories.title"
    summary_title = "Category"

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("title", "Product"),
            ColumnSpec("shops.shop_name", "Shop"),
            ColumnSpec("categories.title", "Category"),
            ColumnSpec("categories_sub.title", "Subcategory", sortable=False),
            ColumnSpec("price", "Price", render=_price_cell),
            ColumnSpec(
                "active",
                "Status",
                sortable=False,
                render=lambda r: "Active" if first_value(r, "active") else "Inactive",
            ),
            ColumnSpec("created_at", "Created", render=lambda r: format_date(r.get("created_at"))),
        ]
