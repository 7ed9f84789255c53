from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd
import plotly.graph_objs as go

from .pipeline import TablePipeline
from .record_schema import RecordSchema
from .records import Record, first_value, normalise_id, resolve_path
from .session import UserSession, is_super_admin
from .table_state import PAGE_SIZES, SortDirection, SortState

if TYPE_CHECKING:
    from market_dash.config.model import ViewConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSpec:
    """
    One table column: where the value comes from, its header, whether the
    table may sort on it, and an optional formatter.
    """
    accessor: str
    title: str
    sortable: bool = True
    render: Optional[Callable[[Record], Any]] = None

    def value(self, record: Record) -> Any:
        if self.render is not None:
            try:
                return self.render(record)
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning(
                    "Column renderer failed",
                    extra={"accessor": self.accessor, "record_id": record.get("id")},
                )
                return ""
        return display_value(resolve_path(record, self.accessor))


def display_value(values: Sequence[Any]) -> Any:
    """Flatten resolved values into something a table cell can show."""
    if not values:
        return ""
    if len(values) > 1:
        return ", ".join(str(v) for v in values)
    value = values[0]
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


class BaseTableView(ABC):
    """
    Abstract base class for all admin table views.

    Defines the contract that every view in the dashboard must follow
    - expose an 'id' - used internally and as the config key
    - expose a 'label' - used for tab titles
    - expose a 'table' - the backend table the record store loads
    - declare a 'schema' - searchable/sortable fields and filter dimensions
    - implement 'columns' - the column descriptors of the rendered table
    """

    id: str = None
    label: str = None
    table: str = None
    schema: RecordSchema = RecordSchema()
    default_sort: SortState = SortState(field="created_at", direction=SortDirection.DESC)

    # Field counted by the summary chart (e.g. order status)
    summary_field: Optional[str] = None
    summary_title: str = "Records"

    # dimension -> (title shown on the dropdown, path of the option label)
    dimension_labels: Dict[str, Tuple[str, Optional[str]]] = {}

    record_label: str = "Record"
    deletable: bool = True

    def __init__(self, session: Optional[UserSession] = None, config: Optional["ViewConfig"] = None):
        self.session = session
        self.config = config

    @abstractmethod
    def columns(self) -> List[ColumnSpec]:
        """
        Column descriptors for the table, in display order
        :return: a list of {@link ColumnSpec}
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Configuration overrides
    # ------------------------------------------------------------------
    @property
    def table_name(self) -> str:
        if self.config is not None and self.config.table:
            return self.config.table
        return self.table

    def initial_sort(self) -> SortState:
        configured = self.config.default_sort if self.config is not None else None
        if configured is not None and self.schema.is_sortable(configured.field):
            return configured
        return self.default_sort

    def initial_page_size(self) -> Optional[int]:
        return self.config.default_page_size if self.config is not None else None

    # ------------------------------------------------------------------
    # Page guards
    # ------------------------------------------------------------------
    def can_view(self) -> bool:
        return self.session is not None

    def can_delete(self) -> bool:
        return self.deletable and is_super_admin(self.session)

    # ------------------------------------------------------------------
    # Record handling
    # ------------------------------------------------------------------
    def prepare_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for derived fields, called once per record when the store loads."""
        return record

    def scope_records(self, records: Iterable[Record]) -> Tuple[Record, ...]:
        """
        Row-level access: non-admins only see records of shops they belong to.
        """
        records = tuple(records)
        shop_field = self.schema.shop_field
        if shop_field is None or is_super_admin(self.session):
            return records
        if self.session is None:
            return ()
        shop_ids = self.session.shop_ids
        return tuple(
            r for r in records
            if any(normalise_id(v) in shop_ids for v in resolve_path(r, shop_field))
        )

    def build_pipeline(
            self,
            records: Iterable[Record],
            state: Optional[Dict[str, Any]] = None,
            *,
            page_sizes: Sequence[int] = PAGE_SIZES,
    ) -> TablePipeline:
        return TablePipeline.from_state(
            self.schema,
            self.scope_records(records),
            state,
            default_sort=self.initial_sort(),
            page_sizes=page_sizes,
            default_page_size=self.initial_page_size(),
        )

    def sortable_fields(self) -> List[str]:
        return [c.accessor for c in self.columns() if c.sortable and self.schema.is_sortable(c.accessor)]

    def to_rows(self, records: Iterable[Record]) -> List[Dict[str, Any]]:
        rows = []
        for record in records:
            row = {column.accessor: column.value(record) for column in self.columns()}
            # The row key is always the normalised id, even when "id" is also a column
            row["id"] = self.schema.record_id(record)
            rows.append(row)
        return rows

    def dimension_options(self, records: Iterable[Record], dimension: str) -> List[Dict[str, Any]]:
        """Distinct foreign keys of a dimension as dropdown options, sorted by label."""
        path = self.schema.dimension_path(dimension)
        if path is None:
            return []
        _, label_path = self.dimension_labels.get(dimension, (dimension, None))

        labels: Dict[str, str] = {}
        for record in records:
            for value in resolve_path(record, path):
                key = normalise_id(value)
                if key is None or key in labels:
                    continue
                label = first_value(record, label_path) if label_path else None
                labels[key] = str(label) if label is not None else key
        return [
            {"label": label, "value": key}
            for key, label in sorted(labels.items(), key=lambda kv: kv[1].lower())
        ]

    # ------------------------------------------------------------------
    # Summary chart
    # ------------------------------------------------------------------
    def compute_summary(self, records: Iterable[Record]) -> pd.DataFrame:
        """
        Count the filtered records per value of summary_field.
        :return: a dataframe with columns 'value' and 'count', largest first
        """
        if self.summary_field is None:
            return pd.DataFrame(columns=["value", "count"])
        values = [
            str(first_value(r, self.summary_field, default="unknown"))
            for r in records
        ]
        if not values:
            return pd.DataFrame(columns=["value", "count"])
        counts = pd.Series(values, dtype="object").value_counts().reset_index()
        counts.columns = ["value", "count"]
        return counts

    def render_summary(self, counts: pd.DataFrame) -> go.Figure:
        if counts.empty:
            return self.empty_figure("No records match the current filters")

        fig = go.Figure()
        fig.add_bar(x=counts["value"], y=counts["count"], name=self.summary_title)
        fig.update_layout(
            title=f"{self.label}: {int(counts['count'].sum())} by {self.summary_title.lower()}",
            height=260,
            margin=dict(l=40, r=20, t=50, b=40),
            showlegend=False,
        )
        fig.update_yaxes(title_text="# records")
        return fig

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            height=260,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
