from datetime import datetime, timezone

import pytest

from profit_tracker import settings
from profit_tracker.calculator import create_product
from profit_tracker.data_handler import ProductStore
from profit_tracker.sales import record_sale


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point every output location at tmp_path and disable the webhook."""
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(settings, "INPUT_DIR", tmp_path / "input")
    monkeypatch.setattr(settings, "OUTPUT_DIR", tmp_path / "output")
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    return tmp_path


@pytest.fixture
def store(tmp_path):
    return ProductStore(tmp_path / "data" / "products.json")


@pytest.fixture
def make_product():
    """Factory: a product built through the calculator, with optional sales applied per day."""

    def _make(
        name="Widget",
        total_cost=100.0,
        quantity=10,
        unit_sale_price=None,
        sales=None,
        created_at=None,
        owner_id=None,
    ):
        product = create_product(
            {
                "name": name,
                "total_cost": total_cost,
                "quantity": quantity,
                "unit_sale_price": unit_sale_price,
            },
            product_id=name.lower().replace(" ", "-"),
            created_at=created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
            owner_id=owner_id,
        )
        for day, amount in (sales or {}).items():
            product = record_sale(product, day, amount)
        return product

    return _make
