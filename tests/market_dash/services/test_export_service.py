import json
from datetime import date

import pytest

from market_dash.services.export_service import ExportService
from market_dash.views import ProductsView


def _make_products():
    return [
        {"id": 1, "title": "חולצה", "price": 20, "shops": {"shop_name": "Acme"}, "active": True},
        {"id": 2, "title": "Boots", "price": 139.9, "onsale": True, "sale_price": 99, "active": False},
    ]


def test_csv_has_bom_and_column_titles():
    payload, filename = ExportService().export(ProductsView(), _make_products(), "csv", today=date(2024, 5, 1))

    assert filename == "products_2024-05-01.csv"
    assert payload.startswith(b"\xef\xbb\xbf")
    lines = payload.decode("utf-8-sig").splitlines()
    assert lines[0].split(",")[:4] == ["id", "Product", "Shop", "Category"]
    assert "חולצה" in lines[1]
    assert len(lines) == 3


def test_json_export_includes_every_record():
    payload, filename = ExportService().export(ProductsView(), _make_products(), "json", today=date(2024, 5, 1))

    assert filename == "products_2024-05-01.json"
    data = json.loads(payload.decode("utf-8"))
    assert data["view"] == "products"
    assert data["total_records"] == 2
    assert data["records"][1]["Price"] == "$99.00 (was $139.90)"
    assert data["records"][0]["Product"] == "חולצה"


def test_unknown_format_raises():
    with pytest.raises(ValueError):
        ExportService().export(ProductsView(), [], "xlsx")


def test_empty_export_still_has_headers():
    frame = ExportService().to_frame(ProductsView(), [])
    assert list(frame.columns)[:2] == ["id", "Product"]
    assert frame.empty
