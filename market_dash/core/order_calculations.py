"""
Order totals, computed the same way everywhere an order is displayed.
"""

from __future__ import annotations

from typing import Any, Mapping


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def order_subtotal(order: Mapping[str, Any]) -> float:
    """Product price only."""
    return _number(_mapping(order.get("products")).get("price"))


def order_delivery_fee(order: Mapping[str, Any]) -> float:
    """Delivery method price plus the location addition; zero without a method."""
    method = order.get("delivery_methods")
    if not isinstance(method, Mapping):
        return 0.0
    location = _mapping(order.get("delivery_location_methods"))
    return _number(method.get("price")) + _number(location.get("price_addition"))


def order_features_total(order: Mapping[str, Any]) -> float:
    features = order.get("selected_features") or []
    return sum(_number(_mapping(f).get("price_addition")) for f in features)


def order_total(order: Mapping[str, Any]) -> float:
    return order_subtotal(order) + order_delivery_fee(order) + order_features_total(order)


def has_order_additions(order: Mapping[str, Any]) -> bool:
    return bool(order.get("delivery_methods") or order.get("selected_features"))
