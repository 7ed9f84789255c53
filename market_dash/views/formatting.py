from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from market_dash.core.records import parse_timestamp


def format_currency(value: Any) -> str:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return ""
    return f"${amount:,.2f}"


def format_date(value: Any) -> str:
    ts = parse_timestamp(value)
    if ts is None:
        return ""
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d")
