"""Row codec: decoding never fails, encoding is stable."""

from datetime import datetime, timezone

from librestock.sheets.codec import COLUMN_COUNT, HEADERS, decode_row, encode_row

from .conftest import STAMP, make_product


def test_headers_are_the_spanish_labels():
    assert COLUMN_COUNT == 10
    assert HEADERS[0] == "ID"
    assert HEADERS[2] == "Código de Barras"
    assert HEADERS[-1] == "Última Actualización"


def test_encode_writes_iso_dates_and_raw_numbers():
    row = encode_row(make_product())
    assert len(row) == 10
    assert row[4] == 10.0
    assert row[6] == 8
    assert row[8] == "2024-03-01T12:30:15.250Z"
    assert row[9] == row[8]


def test_round_trip():
    product = make_product(name="El Principito", min_stock=0, stock=3, cost_price=7.5, sell_price=9.75)
    assert decode_row(encode_row(product), 0) == product


def test_missing_cells_fall_back_to_defaults():
    before = datetime.now(timezone.utc)
    product = decode_row(["", "Solo nombre"], 4)

    assert product.id == "product_4"
    assert product.name == "Solo nombre"
    assert product.barcode == ""
    assert product.cost_price == 0.0
    assert product.sell_price == 0.0
    assert product.stock == 0
    assert product.min_stock == 5
    assert product.date_added >= before.replace(microsecond=0)


def test_unparseable_cost_price_defaults_to_zero_and_is_reported():
    issues = []
    row = ["7", "Libro", "12345678", "Arte", "diez", 13, "x", "?", "ayer", STAMP.isoformat()]

    product = decode_row(row, 0, issues)

    assert product.cost_price == 0.0
    assert product.sell_price == 13.0
    assert product.stock == 0
    assert product.min_stock == 5
    assert product.last_updated == STAMP
    assert {issue.column for issue in issues} == {"costPrice", "stock", "minStock", "dateAdded"}


def test_numeric_strings_and_numbers_are_accepted():
    row = ["9", "Libro", 97884204, "Arte", "4.5", "5.85", "12", 3.0, "", ""]
    product = decode_row(row, 0)
    assert product.barcode == "97884204"
    assert product.cost_price == 4.5
    assert product.stock == 12
    assert product.min_stock == 3


def test_empty_row_does_not_raise():
    product = decode_row([], 2)
    assert product.id == "product_2"
