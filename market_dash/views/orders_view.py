from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from market_dash.core.base_view import BaseTableView, ColumnSpec
from market_dash.core.order_calculations import has_order_additions, order_total
from market_dash.core.record_schema import FieldType, RecordSchema
from market_dash.core.records import first_value
from market_dash.core.table_state import SortDirection, SortState
from market_dash.views.formatting import format_currency, format_date

# Backend status values seen in the wild -> the status shown and filtered on
STATUS_MAP = {
    "Active": "processing",
    "Pending": "processing",
    "Processing": "processing",
    "Shipped": "on_the_way",
    "On The Way": "on_the_way",
    "Completed": "completed",
    "Delivered": "completed",
    "Cancelled": "cancelled",
    "Rejected": "rejected",
    "Ready For Pickup": "ready_for_pickup",
    "processing": "processing",
    "on_the_way": "on_the_way",
    "completed": "completed",
    "cancelled": "cancelled",
    "rejected": "rejected",
    "ready_for_pickup": "ready_for_pickup",
}

DELIVERY_STATUS_MAP = {
    "Active": "preparing",
    "Pending": "pending",
    "Shipped": "shipped",
    "Completed": "delivered",
    "Delivered": "delivered",
    "Cancelled": "cancelled",
}


def parse_json_field(value: Any) -> Dict[str, Any]:
    """
    Address and payment columns arrive either as objects or as JSON text.
    Anything unreadable becomes an empty mapping.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return {}
    return dict(value) if isinstance(value, Mapping) else {}


def delivery_type(shipping_method: Any) -> str:
    if isinstance(shipping_method, str) and shipping_method.strip('"') == "delivery":
        return "delivery"
    return "pickup"


class OrdersView(BaseTableView):
    """
    Orders joined with their product, shop and buyer.

    prepare_record derives the display fields once per load:

    - name / buyer / shop_name / city for search and display
    - status normalised to the dashboard's vocabulary
    - delivery_type from the shipping method
    - total, product price plus delivery and feature additions
    """

    id = "orders"
    label = "Orders"
    record_label = "Order"
    table = "orders"
    schema = RecordSchema(
        searchable=("name", "buyer", "total_text", "shop_name", "delivery_status", "city"),
        sortable={
            "id": FieldType.NUMBER,
            "name": FieldType.TEXT,
            "buyer": FieldType.TEXT,
            "shop_name": FieldType.TEXT,
            "city": FieldType.TEXT,
            "total": FieldType.NUMBER,
            "status": FieldType.TEXT,
            "created_at": FieldType.DATE,
        },
        dimensions={
            "status": "status",
            "delivery_type": "delivery_type",
            "shop": "shop",
        },
        date_field="created_at",
        shop_field="shop",
    )
    default_sort = SortState(field="created_at", direction=SortDirection.DESC)
    dimension_labels = {
        "status": ("Status", None),
        "delivery_type": ("Order type", None),
        "shop": ("Shop", "shop_name"),
    }
    summary_field = "status"
    summary_title = "Status"

    def prepare_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        address = parse_json_field(record.get("shipping_address"))
        raw_status = record.get("status")

        record["name"] = first_value(record, "products.title", default="Product")
        record["buyer"] = (
            first_value(record, "profiles.full_name") or address.get("name") or "Unknown Customer"
        )
        record["shop"] = first_value(record, "products.shop")
        record["shop_name"] = first_value(record, "products.shops.shop_name", default="Unknown Shop")
        record["city"] = address.get("city") or "Unknown City"
        record["status"] = STATUS_MAP.get(raw_status, "processing")
        record["delivery_status"] = DELIVERY_STATUS_MAP.get(raw_status, "pending")
        record["delivery_type"] = delivery_type(record.get("shipping_method"))
        record["confirmed"] = bool(record.get("confirmed"))

        if record.get("total") is None:
            record["total"] = order_total(record)
        record["total_text"] = format_currency(record["total"])
        record["has_additions"] = has_order_additions(record)
        return record

    def columns(self) -> List[ColumnSpec]:
        return [
            ColumnSpec("id", "Order"),
            ColumnSpec("name", "Product"),
            ColumnSpec("buyer", "Customer"),
            ColumnSpec("shop_name", "Shop"),
            ColumnSpec("city", "City"),
            ColumnSpec("delivery_type", "Type", sortable=False),
            ColumnSpec("status", "Status"),
            ColumnSpec("total", "Total", render=lambda r: r.get("total_text", "")),
            ColumnSpec("created_at", "Date", render=lambda r: format_date(r.get("created_at"))),
        ]
