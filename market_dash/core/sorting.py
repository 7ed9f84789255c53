from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Optional

from .record_schema import FieldType, RecordSchema
from .records import Record, first_value, parse_timestamp
from .table_state import SortState


def _text_key(value: Any) -> str:
    return "" if value is None else str(value)


def _number_key(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _date_key(value: Any) -> float:
    ts = parse_timestamp(value)
    return 0.0 if ts is None else ts


# Missing values map to the type minimum: "", 0, epoch
_KEY_FUNCS: Dict[FieldType, Callable[[Any], Any]] = {
    FieldType.TEXT: _text_key,
    FieldType.NUMBER: _number_key,
    FieldType.DATE: _date_key,
}


def infer_field_type(records: Iterable[Record], path: str) -> FieldType:
    """Numeric when every present value is a number, text otherwise."""
    seen = False
    for record in records:
        value = first_value(record, path)
        if value is None:
            continue
        seen = True
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return FieldType.TEXT
    return FieldType.NUMBER if seen else FieldType.TEXT


def sort_records(
        records: Iterable[Record],
        state: SortState,
        schema: Optional[RecordSchema] = None,
) -> List[Record]:
    """
    Stable ascending sort on the typed key of state.field.

    Descending is the ascending result reversed, not a negated comparator,
    so records with equal keys come out in reverse of their input order.
    """
    rows = list(records)
    field_type = schema.field_type(state.field) if schema is not None else None
    if field_type is None:
        field_type = infer_field_type(rows, state.field)
    key = _KEY_FUNCS[field_type]

    ordered = sorted(rows, key=lambda record: key(first_value(record, state.field)))
    if state.descending:
        ordered.reverse()
    return ordered
