"""Shared fixtures: an app on the in-memory sheet backend."""

from datetime import datetime, timezone

import pytest

from librestock import create_app
from librestock.config import TestConfig
from librestock.models import Product
from librestock.sheets.codec import HEADERS, encode_row

STAMP = datetime(2024, 3, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


def make_product(**overrides) -> Product:
    values = {
        "id": "1001",
        "name": "Don Quijote",
        "barcode": "9788420412146",
        "category": "Ficción",
        "cost_price": 10.0,
        "sell_price": 13.0,
        "stock": 8,
        "min_stock": 5,
        "date_added": STAMP,
        "last_updated": STAMP,
    }
    values.update(overrides)
    return Product(**values)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sheet_client(app):
    return app.extensions["librestock.sheets"]


@pytest.fixture
def sheet_rows(sheet_client):
    """The raw row list behind the Productos sheet (header included)."""
    rows = sheet_client.sheets["Productos"]
    rows.append(list(HEADERS))
    return rows


@pytest.fixture
def seeded(sheet_rows):
    products = [
        make_product(id="1", name="Don Quijote", barcode="11111111", category="Ficción", stock=0, min_stock=5),
        make_product(id="2", name="Atlas Mundial", barcode="22222222", category="Ciencia", stock=10, min_stock=5,
                     cost_price=20.0, sell_price=26.0),
        make_product(id="3", name="Cien Años de Soledad", barcode="33333333", category="Ficción", stock=5,
                     min_stock=5, cost_price=12.0, sell_price=15.6),
    ]
    for product in products:
        sheet_rows.append(encode_row(product))
    return products
