from __future__ import annotations

from typing import List

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.session import can_access_users, can_delete_users
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_date


class UsersView(BaseTableView):
    """
    Dashboard users. Shop owners and editors see the users that share a shop
    with them; super admins see everyone.
    """

    id = "users"
    label = "Users"
    record_label = "User"
    table = "users"
    schema = RecordSchema(
        searchable=("full_name", "email"),
        sortable={
            "full_name": FieldType.TEXT,
            "email": FieldType.TEXT,
            "user_roles.display_name": FieldType.TEXT,
            "registration_date": FieldType.DATE,
        },
        dimensions={"role": "user_roles.name"},
        date_field="registration_date",
        shop_field="shops.shop_id",
    )
    default_sort = SortState(field="registration_date", direction=SortDirection.DESC)
    dimension_labels = {"role": ("Role", "user_roles.display_name")}
    summary_field = "user_roles.display_name"
    summary_title = "Role"

    def can_view(self) -> bool:
        return can_access_users(self.session)

    def can_delete(self) -> bool:
        return self.deletable and can_delete_users(self.session)

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("full_name", "Name"),
            ColumnSpec("email", "Email"),
            ColumnSpec("user_roles.display_name", "Role"),
            ColumnSpec("shops.shops.shop_name", "Shops", sortable=False),
            ColumnSpec("status", "Status", sortable=False),
            ColumnSpec(
                "registration_date",
                "Registered",
                render=lambda r: format_date(r.get("registration_date")),
            ),
        ]
