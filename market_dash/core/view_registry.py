from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional, Type

from .base_view import BaseTableView
from .exceptions import RecordSchemaError
from .session import UserSession

if TYPE_CHECKING:
    from market_dash.config.model import ViewConfig


class ViewRegistry:
    """
    Registry for table view classes so the app can build tabs dynamically

    Purpose:
    - Decouples the Dash layer from hardcoded views by exposing {@link create(view_id, session, config)}
    - Drives navigation (tabs) from the registered views rather than hardcoded lists

    Design Notes:
    - Stores the subclasses of {@link BaseTableView}, not instances, so each view is instantiated
      per request with the session it is rendered for
    - Enforces invariants:
        * only {@link BaseTableView} subclasses can be registered
        * each view 'id' is unique across the registry
    """

    def __init__(self):
        self._views: Dict[str, Type[BaseTableView]] = {}

    def register(self, view_cls: Type[BaseTableView]) -> None:
        """
        Register a {@link BaseTableView} with the registry

        :param view_cls: the subclass of {@link BaseTableView}

        Raises:
            TypeError: if view_cls is not a subclass of {@link BaseTableView}
            ValueError: if a view with same 'id' already exists
            RecordSchemaError: if the view's default sort or dropdown labels don't match its schema
        """
        if not isinstance(view_cls, type) or not issubclass(view_cls, BaseTableView):
            raise TypeError(f"View '{getattr(view_cls, 'id', view_cls)}' must be a subclass of BaseTableView")

        if view_cls.id in self._views:
            raise ValueError(f"View '{view_cls.id}' already registered")

        _check_schema(view_cls)
        self._views[view_cls.id] = view_cls

    def create(
            self,
            view_id: str,
            session: Optional[UserSession] = None,
            config: Optional["ViewConfig"] = None,
    ) -> BaseTableView:
        """
        Instantiate a view for the given view_id, bound to a session

        Raises:
            KeyError: if no view with the given id exists in the registry
        """
        try:
            cls = self._views[view_id]
        except KeyError:
            raise KeyError(f"View '{view_id}' not found")
        return cls(session=session, config=config)

    def get_class(self, view_id: str) -> Type[BaseTableView]:
        try:
            return self._views[view_id]
        except KeyError:
            raise KeyError(f"View '{view_id}' not found")

    def all_classes(self) -> List[Type[BaseTableView]]:
        """
        Used at UI layer to build the tab bar. Keeps UI fully driven by the registry.
        """
        return list(self._views.values())

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._views


def _check_schema(view_cls: Type[BaseTableView]) -> None:
    schema = view_cls.schema
    if not schema.is_sortable(view_cls.default_sort.field):
        raise RecordSchemaError(
            f"View '{view_cls.id}': default sort '{view_cls.default_sort.field}' is not a sortable field"
        )
    unknown = set(view_cls.dimension_labels) - set(schema.dimensions)
    if unknown:
        raise RecordSchemaError(f"View '{view_cls.id}': labels for unknown dimensions {sorted(unknown)}")
