from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional, Tuple

import pandas as pd

from market_dash.core.base_view import BaseTableView
from market_dash.core.records import Record

logger = logging.getLogger(__name__)

CSV = "csv"
JSON = "json"
EXPORT_FORMATS = (CSV, JSON)

# Excel only picks UTF-8 (and right-to-left scripts) up reliably with a BOM
_UTF8_BOM = "\ufeff"


class ExportService:
    """
    Serialises the filtered + sorted collection of a view (every page, not
    just the visible one) using the view's column descriptors.
    Stateless: callers pass the records to export.
    """

    def to_frame(self, view: BaseTableView, records: Iterable[Record]) -> pd.DataFrame:
        columns = view.columns()
        rows = view.to_rows(records)
        # 'id' stays first even when it is also a column
        names = list(dict.fromkeys(["id"] + [c.accessor for c in columns]))
        frame = pd.DataFrame(rows, columns=names)
        titles = {c.accessor: c.title for c in columns}
        return frame.rename(columns=titles)

    def export_csv(self, view: BaseTableView, records: Iterable[Record]) -> bytes:
        frame = self.to_frame(view, records)
        text = frame.to_csv(index=False, lineterminator="\n")
        return (_UTF8_BOM + text).encode("utf-8")

    def export_json(self, view: BaseTableView, records: Iterable[Record]) -> bytes:
        frame = self.to_frame(view, records)
        payload: Dict[str, Any] = {
            "view": view.id,
            "generated": date.today().isoformat(),
            "total_records": len(frame),
            "records": json.loads(frame.to_json(orient="records", force_ascii=False)),
        }
        return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")

    def export(
            self,
            view: BaseTableView,
            records: Iterable[Record],
            fmt: str,
            *,
            today: Optional[date] = None,
    ) -> Tuple[bytes, str]:
        """
        :return: (payload, filename) where filename is '<view>_<YYYY-MM-DD>.<fmt>'
        :raises ValueError: for an unknown format
        """
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format '{fmt}'")

        records = list(records)
        payload = self.export_csv(view, records) if fmt == CSV else self.export_json(view, records)
        filename = f"{view.id}_{(today or date.today()).isoformat()}.{fmt}"
        logger.info(
            "Exported view",
            extra={"view_id": view.id, "format": fmt, "n_records": len(records)},
        )
        return payload, filename
