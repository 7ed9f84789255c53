"""
Core domain layer: record schema, filter/sort/page stages, the table
pipeline, session permissions, the view base class and the view registry
"""

from .filter_state import FilterState
from .pipeline import DisplaySlice, TablePipeline, Trigger
from .record_schema import FieldType, RecordSchema
from .table_state import PAGE_SIZES, PageState, SortDirection, SortState
from .session import UserSession
from .base_view import BaseTableView, ColumnSpec
from .view_registry import ViewRegistry

__all__ = [
    "FilterState",
    "DisplaySlice",
    "TablePipeline",
    "Trigger",
    "FieldType",
    "RecordSchema",
    "PAGE_SIZES",
    "PageState",
    "SortDirection",
    "SortState",
    "UserSession",
    "BaseTableView",
    "ColumnSpec",
    "ViewRegistry",
]
