from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.session import is_super_admin
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_date


class DeliveriesView(BaseTableView):
    """Delivery drivers and the cars assigned to them."""

    id = "deliveries"
    label = "Drivers"
    record_label = "Driver"
    table = "delivery_drivers"
    schema = RecordSchema(
        searchable=("name", "phone", "id_number"),
        sortable={
            "name": FieldType.TEXT,
            "phone": FieldType.TEXT,
            "created_at": FieldType.DATE,
        },
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)

    def can_view(self) -> bool:
        return is_super_admin(self.session)

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("name", "Name"),
            ColumnSpec("phone", "Phone"),
            ColumnSpec("id_number", "ID number", sortable=False),
            ColumnSpec("delivery_cars.plate_number", "Cars", sortable=False),
            ColumnSpec("created_at", "Created", render=lambda r: format_date(r.get("created_at"))),
        ]
