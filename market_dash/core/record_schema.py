from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .records import normalise_id

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Semantic type of a sortable field; decides how values are compared."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class RecordSchema:
    """
    Per-view declaration of the record shape the pipeline works on.

    Fields:

    - searchable: dotted paths scanned by the free-text search
    - sortable: dotted path -> FieldType for every column the table can order by
    - dimensions: structural filter name -> dotted path of the foreign key it tests
    - date_field: path used by the date-range filter, if the view has one
    - shop_field: path of the owning shop id, used to scope rows to a session
    - id_field: the stable identifier of a record
    """
    searchable: Tuple[str, ...] = ()
    sortable: Mapping[str, FieldType] = field(default_factory=dict)
    dimensions: Mapping[str, str] = field(default_factory=dict)
    date_field: Optional[str] = None
    shop_field: Optional[str] = None
    id_field: str = "id"

    def field_type(self, path: str) -> Optional[FieldType]:
        return self.sortable.get(path)

    def is_sortable(self, path: str) -> bool:
        return path in self.sortable

    def dimension_path(self, dimension: str) -> Optional[str]:
        return self.dimensions.get(dimension)

    def record_id(self, record: Mapping[str, Any]) -> Optional[str]:
        return normalise_id(record.get(self.id_field))

    # ------------------------------------------------------------------
    # Decoding at the record-store boundary
    # ------------------------------------------------------------------
    def decode(self, raw: Any) -> Optional[Dict[str, Any]]:
        """
        Validate one raw backend row. Rows that are not mappings, or carry no
        usable identifier, are rejected (None). Everything else is copied so the
        store owns its own collection.
        """
        if not isinstance(raw, Mapping):
            logger.warning("Dropping non-mapping row", extra={"row_type": type(raw).__name__})
            return None
        if normalise_id(raw.get(self.id_field)) is None:
            logger.warning("Dropping row without identifier", extra={"id_field": self.id_field})
            return None
        return dict(raw)

    def decode_all(self, rows: Iterable[Any]) -> Tuple[Dict[str, Any], ...]:
        decoded = []
        dropped = 0
        for raw in rows or ():
            record = self.decode(raw)
            if record is None:
                dropped += 1
                continue
            decoded.append(record)
        if dropped:
            logger.warning("Dropped malformed rows", extra={"dropped": dropped, "kept": len(decoded)})
        return tuple(decoded)
