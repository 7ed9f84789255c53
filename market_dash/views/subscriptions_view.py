from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.records import first_value
from market_dash.core.session import is_super_admin
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_currency, format_date


class SubscriptionsView(BaseTableView):
    id = "subscriptions"
    label = "Subscriptions"
    record_label = "Subscription"
    table = "subscriptions"
    schema = RecordSchema(
        searchable=("profiles.full_name", "profiles.email", "license.title", "status"),
        sortable={
            "profiles.full_name": FieldType.TEXT,
            "license.title": FieldType.TEXT,
            "license.price": FieldType.NUMBER,
            "status": FieldType.TEXT,
            "created_at": FieldType.DATE,
        },
        dimensions={
            "license": "license_id",
            "status": "status",
        },
        date_field="created_at",
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)
    dimension_labels = {
        "license": ("License", "license.title"),
        "status": ("Status", None),
    }
    summary_field = "license.title"
    summary_title = "License"

    def can_view(self) -> bool:
        return is_super_admin(self.session)

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("profiles.full_name", "Subscriber"),
            ColumnSpec("profiles.email", "Email", sortable=False),
            ColumnSpec("license.title", "License"),
            ColumnSpec("license.price", "Price", render=lambda r: format_currency(first_value(r, "license.price"))),
            ColumnSpec("status", "Status"),
            ColumnSpec("created_at", "Started", render=lambda r: format_date(r.get("created_at"))),
        ]
