"""Mapping between flat spreadsheet rows and :class:`Product` records.

Rows follow a fixed 10-column layout (A:J)::

    id, name, barcode, category, costPrice, sellPrice,
    stock, minStock, dateAdded, lastUpdated

Decoding never raises. A missing cell falls back to its default; a cell that
is present but cannot be parsed also falls back, and is reported as a
:class:`DecodeIssue` so callers can log it instead of losing it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence

from ..models import DEFAULT_MIN_STOCK, Product
from ..utils.dates import format_timestamp, parse_timestamp, utcnow

HEADERS = (
    "ID",
    "Nombre",
    "Código de Barras",
    "Categoría",
    "Precio Costo",
    "Precio Venta",
    "Stock",
    "Stock Mínimo",
    "Fecha Agregado",
    "Última Actualización",
)

COLUMN_COUNT = len(HEADERS)

ID, NAME, BARCODE, CATEGORY, COST_PRICE, SELL_PRICE, STOCK, MIN_STOCK, DATE_ADDED, LAST_UPDATED = range(COLUMN_COUNT)


@dataclass(frozen=True)
class DecodeIssue:
    row_index: int
    column: str
    raw: Any
    default: Any

    def describe(self) -> str:
        return f"row {self.row_index}: {self.column}={self.raw!r} unreadable, using {self.default!r}"


def _cell(row: Sequence[Any], position: int) -> Any:
    if position >= len(row):
        return None
    value = row[position]
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _parse_int(value: Any) -> Optional[int]:
    number = _parse_float(value)
    if number is None:
        return None
    return int(number)


class _RowReader:
    def __init__(self, row: Sequence[Any], index: int, issues: Optional[List[DecodeIssue]]) -> None:
        self.row = row
        self.index = index
        self.issues = issues

    def note(self, column: str, raw: Any, default: Any) -> None:
        if self.issues is not None:
            self.issues.append(DecodeIssue(self.index, column, raw, default))

    def number(self, position: int, column: str, parse, default):
        raw = _cell(self.row, position)
        if raw is None:
            return default
        value = parse(raw)
        if value is None:
            self.note(column, raw, default)
            return default
        return value

    def timestamp(self, position: int, column: str, now: datetime) -> datetime:
        raw = _cell(self.row, position)
        if raw is None:
            return now
        value = parse_timestamp(raw)
        if value is None:
            self.note(column, raw, "now")
            return now
        return value


def decode_row(row: Sequence[Any], index: int, issues: Optional[List[DecodeIssue]] = None) -> Product:
    """Build a Product from ``row``; ``index`` is the 0-based data-row position."""
    reader = _RowReader(row or (), index, issues)
    now = utcnow()

    raw_id = _cell(reader.row, ID)
    if raw_id is None:
        product_id = f"product_{index}"
        reader.note("id", None, product_id)
    else:
        product_id = _text(raw_id)

    return Product(
        id=product_id,
        name=_text(_cell(reader.row, NAME)),
        barcode=_text(_cell(reader.row, BARCODE)),
        category=_text(_cell(reader.row, CATEGORY)),
        cost_price=reader.number(COST_PRICE, "costPrice", _parse_float, 0.0),
        sell_price=reader.number(SELL_PRICE, "sellPrice", _parse_float, 0.0),
        stock=reader.number(STOCK, "stock", _parse_int, 0),
        min_stock=reader.number(MIN_STOCK, "minStock", _parse_int, DEFAULT_MIN_STOCK),
        date_added=reader.timestamp(DATE_ADDED, "dateAdded", now),
        last_updated=reader.timestamp(LAST_UPDATED, "lastUpdated", now),
    )


def encode_row(product: Product) -> List[Any]:
    return [
        product.id,
        product.name,
        product.barcode,
        product.category,
        product.cost_price,
        product.sell_price,
        product.stock,
        product.min_stock,
        format_timestamp(product.date_added),
        format_timestamp(product.last_updated),
    ]
