from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .filter_state import FilterState
from .record_schema import RecordSchema
from .records import Record, is_date_only, normalise_id, parse_timestamp, resolve_path

logger = logging.getLogger(__name__)

_ONE_DAY = 24 * 60 * 60


def matches_search(record: Record, search_text: str, schema: RecordSchema) -> bool:
    """
    Case-insensitive substring match over the schema's searchable paths.
    Empty search text matches everything; missing fields never match.
    """
    if not search_text:
        return True
    needle = search_text.lower()
    for path in schema.searchable:
        for value in resolve_path(record, path):
            if needle in str(value).lower():
                return True
    return False


def matches_dimension(record: Record, path: str, allowed: Set[str]) -> bool:
    keys = {normalise_id(v) for v in resolve_path(record, path)}
    keys.discard(None)
    return bool(keys & allowed)


def _range_bounds(date_range: Tuple[str, str]) -> Optional[Tuple[float, float, bool]]:
    """
    (start, end, end_inclusive). A date-only end bound covers the whole day,
    so it becomes an exclusive bound at the next midnight.
    """
    start_raw, end_raw = date_range
    start = parse_timestamp(start_raw)
    end = parse_timestamp(end_raw)
    if start is None or end is None:
        return None
    if is_date_only(end_raw):
        return start, end + _ONE_DAY, False
    return start, end, True


def matches_date_range(record: Record, date_range: Tuple[str, str], path: str) -> bool:
    bounds = _range_bounds(date_range)
    if bounds is None:
        return True
    start, end, end_inclusive = bounds
    values = resolve_path(record, path)
    ts = parse_timestamp(values[0]) if values else None
    if ts is None:
        return False
    if ts < start:
        return False
    return ts <= end if end_inclusive else ts < end


def filter_records(
        records: Iterable[Record],
        state: FilterState,
        schema: RecordSchema,
) -> List[Record]:
    """
    Retain the records matching the search text, every active structural
    dimension and the date range. Dimensions the schema doesn't know are
    ignored rather than failing the pass.
    """
    dimension_checks = []
    for dimension, allowed in state.active_filters().items():
        path = schema.dimension_path(dimension)
        if path is None:
            logger.debug("Ignoring unknown filter dimension", extra={"dimension": dimension})
            continue
        dimension_checks.append((path, allowed))

    date_range = state.date_range if schema.date_field else None

    out: List[Record] = []
    for record in records:
        if not matches_search(record, state.search_text, schema):
            continue
        if not all(matches_dimension(record, path, allowed) for path, allowed in dimension_checks):
            continue
        if date_range and not matches_date_range(record, date_range, schema.date_field):
            continue
        out.append(record)
    return out
