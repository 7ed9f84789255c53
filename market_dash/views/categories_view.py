from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.session import is_super_admin
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_date


class CategoriesView(BaseTableView):
    id = "categories"
    label = "Categories"
    record_label = "Category"
    table = "categories"
    schema = RecordSchema(
        searchable=("title", "desc"),
        sortable={
            "id": FieldType.NUMBER,
            "title": FieldType.TEXT,
            "shops.shop_name": FieldType.TEXT,
            "created_at": FieldType.DATE,
        },
        dimensions={"shop": "shop_id"},
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)
    dimension_labels = {"shop": ("Shop", "shops.shop_name")}

    def can_view(self) -> bool:
        # Categories are shared by every shop; only admins curate them
        return is_super_admin(self.session)

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("id", "ID"),
            ColumnSpec("title", "Title"),
            ColumnSpec("desc", "Description", sortable=False),
            ColumnSpec("shops.shop_name", "Shop"),
            ColumnSpec("created_at", "Created", render=lambda r: format_date(r.get("created_at"))),
        ]
