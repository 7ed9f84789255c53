from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.records import first_value
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_date


class ShopsView(BaseTableView):
    """
    All shops, with their category and owners joined in.

    Owners are searchable, so typing a person's name finds the shops they run.
    Non-admins only see the shops they are a member of.
    """

    id = "shops"
    label = "Shops"
    record_label = "Shop"
    table = "shops"
    schema = RecordSchema(
        searchable=("shop_name", "shop_owners.profiles.full_name"),
        sortable={
            "id": FieldType.NUMBER,
            "shop_name": FieldType.TEXT,
            "categories_shop.title": FieldType.TEXT,
            "status": FieldType.TEXT,
            "created_at": FieldType.DATE,
        },
        dimensions={
            "category": "category_shop_id",
            "status": "status",
        },
        shop_field="id",
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)
    dimension_labels = {
        "category": ("Category", "categories_shop.title"),
        "status": ("Status", None),
    }
    summary_field = "status"
    summary_title = "Status"

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("id", "ID"),
            ColumnSpec("shop_name", "Shop"),
            ColumnSpec("shop_owners.profiles.full_name", "Owners", sortable=False),
            ColumnSpec("categories_shop.title", "Category"),
            ColumnSpec("status", "Status"),
            ColumnSpec(
                "active",
                "Visibility",
                sortable=False,
                render=lambda r: "Active" if first_value(r, "active") else "Inactive",
            ),
            ColumnSpec("created_at", "Created", render=lambda r: format_date(r.get("created_at"))),
        ]
