from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.session import is_super_admin
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_currency, format_date


class LicensesView(BaseTableView):
    """
    License plans sold to shop owners. `shops` and `products` are the
    plan's limits, not joins.
    """

    id = "licenses"
    label = "Licenses"
    record_label = "License"
    table = "licenses"
    schema = RecordSchema(
        searchable=("title", "desc"),
        sortable={
            "title": FieldType.TEXT,
            "price": FieldType.NUMBER,
            "shops": FieldType.NUMBER,
            "products": FieldType.NUMBER,
            "created_at": FieldType.DATE,
        },
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)

    def can_view(self) -> bool:
        return is_super_admin(self.session)

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("title", "Title"),
            ColumnSpec("desc", "Description", sortable=False),
            ColumnSpec("price", "Price", render=lambda r: format_currency(r.get("price"))),
            ColumnSpec("shops", "Shops"),
            ColumnSpec("products", "Products"),
            ColumnSpec("created_at", "Created", render=lambda r: format_date(r.get("created_at"))),
        ]
