from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

# A record is an opaque mapping with a stable "id" plus whatever fields the
# backend joined in. Nested rows are addressed with dotted paths.
Record = Mapping[str, Any]


def _expand(values: Iterable[Any]) -> List[Any]:
    out: List[Any] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            out.extend(value)
        else:
            out.append(value)
    return out


def resolve_path(record: Any, path: str) -> List[Any]:
    """
    Return every non-null value found at a dotted path.

    Lists are crossed transparently, so for a shop with several owners
    "shop_owners.profiles.full_name" yields one name per owner. Missing keys
    and non-mapping intermediates simply contribute nothing.
    """
    values: List[Any] = [record]
    for part in path.split("."):
        values = [
            value[part]
            for value in _expand(values)
            if isinstance(value, Mapping) and part in value
        ]
        if not values:
            return []
    return [v for v in _expand(values) if v is not None]


def first_value(record: Any, path: str, default: Any = None) -> Any:
    values = resolve_path(record, path)
    return values[0] if values else default


def normalise_id(value: Any) -> Optional[str]:
    """
    Canonical string form of an identifier so that 3, "3" and 3.0 compare equal.
    Returns None for values that cannot identify anything.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


def parse_timestamp(value: Any) -> Optional[float]:
    """
    Seconds since the epoch for an ISO string, a datetime or a numeric timestamp.
    Returns None when the value is missing or unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str) and not value.strip():
        return None
    try:
        ts = pd.to_datetime(value, utc=True, errors="coerce")
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    return ts.timestamp()


def is_date_only(value: Any) -> bool:
    """True for plain calendar dates such as '2024-02-01' (no time component)."""
    return isinstance(value, str) and len(value.strip()) == 10
