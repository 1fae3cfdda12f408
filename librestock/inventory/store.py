"""Product persistence on top of the spreadsheet row store.

Row 1 of the sheet holds the headers; product ``n`` (0-based) lives on sheet
row ``n + 2``. Rows are addressed by position only, so ``replace`` and
``remove`` re-read the whole sheet and scan for the id before writing.
Nothing guards that read-then-write window: two concurrent replaces of one id
both read the same snapshot and the last write wins, and a delete that lands
between another caller's scan and write shifts the rows under it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from flask import current_app

from ..extensions import sheets
from ..models import Product
from ..sheets.client import quote_sheet_name
from ..sheets.codec import COLUMN_COUNT, HEADERS, DecodeIssue, decode_row, encode_row
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2
LAST_COLUMN = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"[COLUMN_COUNT - 1]


class ProductNotFound(LookupError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id!r} not found")
        self.product_id = product_id


@dataclass
class ListResult:
    products: List[Product] = field(default_factory=list)
    error: Optional[str] = None
    issues: List[DecodeIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class _IdClock:
    """Millisecond timestamps as ids, bumped so one process never repeats."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next_id(self) -> str:
        with self._lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


_ids = _IdClock()


class ProductStore:
    def __init__(self, client, sheet_name: str = "Productos", grid_id: Optional[int] = None) -> None:
        self.client = client
        self.sheet_name = sheet_name
        self._grid_id = grid_id

    @property
    def table_range(self) -> str:
        return f"{quote_sheet_name(self.sheet_name)}!A:{LAST_COLUMN}"

    def _row_range(self, row_number: int) -> str:
        return f"{quote_sheet_name(self.sheet_name)}!A{row_number}:{LAST_COLUMN}{row_number}"

    @property
    def grid_id(self) -> int:
        if self._grid_id is None:
            resolved = self.client.sheet_id_for(self.sheet_name)
            if resolved is None:
                logger.warning("Sheet %r not found in spreadsheet metadata; assuming grid id 0", self.sheet_name)
                resolved = 0
            self._grid_id = resolved
        return self._grid_id

    def _read_products(self) -> Tuple[List[Product], List[DecodeIssue]]:
        rows = self.client.read_range(self.table_range)
        issues: List[DecodeIssue] = []
        if len(rows) <= 1:
            return [], issues
        products = [decode_row(row, index, issues) for index, row in enumerate(rows[1:])]
        for issue in issues:
            logger.warning("Defaulted unreadable cell in %s: %s", self.sheet_name, issue.describe())
        return products, issues

    def _locate(self, product_id: str) -> Tuple[int, Product]:
        products, _ = self._read_products()
        for position, product in enumerate(products):
            if product.id == product_id:
                return position, product
        raise ProductNotFound(product_id)

    def list_all(self) -> ListResult:
        try:
            products, issues = self._read_products()
        except Exception as exc:
            logger.exception("Unable to load products: %s", exc)
            return ListResult(products=[], error=str(exc) or exc.__class__.__name__)
        return ListResult(products=products, issues=issues)

    def append(self, fields: Mapping[str, Any]) -> Product:
        now = utcnow()
        values = {key: value for key, value in fields.items() if key not in ("id", "date_added", "last_updated")}
        product = Product(id=_ids.next_id(), date_added=now, last_updated=now, **values)
        self.client.append_row(self.table_range, encode_row(product))
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    def replace(self, product_id: str, updates: Mapping[str, Any]) -> Product:
        position, existing = self._locate(product_id)
        updated = existing.merged(updates, utcnow())
        row_number = position + FIRST_DATA_ROW
        self.client.update_range(self._row_range(row_number), [encode_row(updated)])
        logger.info("Updated product %s at row %d", product_id, row_number)
        return updated

    def remove(self, product_id: str) -> None:
        position, _ = self._locate(product_id)
        # deleteDimension indexes are 0-based and end-exclusive
        start = position + FIRST_DATA_ROW - 1
        self.client.delete_row_range(self.grid_id, start, start + 1)
        logger.info("Deleted product %s from row %d", product_id, start + 1)

    def find_by_barcode(self, barcode: str) -> Optional[Product]:
        products, _ = self._read_products()
        for product in products:
            if product.barcode == barcode:
                return product
        return None

    def initialize_sheet(self) -> None:
        self.client.update_range(self._row_range(1), [list(HEADERS)])
        logger.info("Wrote header row to sheet %s", self.sheet_name)


def get_store() -> ProductStore:
    cfg = current_app.config
    store = current_app.extensions.get("librestock.store")
    if store is None:
        store = ProductStore(
            sheets.client,
            sheet_name=cfg.get("SHEET_NAME", "Productos"),
            grid_id=cfg.get("SHEET_GRID_ID"),
        )
        current_app.extensions["librestock.store"] = store
    return store

