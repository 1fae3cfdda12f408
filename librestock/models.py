from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Mapping

from .utils.dates import format_timestamp, utcnow


CATEGORIES = (
    "Ficción",
    "No Ficción",
    "Académico",
    "Infantil",
    "Juvenil",
    "Historia",
    "Ciencia",
    "Arte",
    "Biografía",
    "Autoayuda",
    "Poesía",
    "Teatro",
    "Cómics",
    "Revistas",
    "Otros",
)

CURRENCIES = {
    "$": "USD ($)",
    "€": "EUR (€)",
    "£": "GBP (£)",
    "¥": "JPY (¥)",
    "S/": "PEN (S/)",
    "Bs": "BOB (Bs)",
}

DEFAULT_MIN_STOCK = 5

# JSON key -> Product attribute
FIELD_NAMES: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "barcode": "barcode",
    "category": "category",
    "costPrice": "cost_price",
    "sellPrice": "sell_price",
    "stock": "stock",
    "minStock": "min_stock",
    "dateAdded": "date_added",
    "lastUpdated": "last_updated",
}

# Fields a caller may change after creation.
EDITABLE_FIELDS = ("name", "barcode", "category", "cost_price", "sell_price", "stock", "min_stock")


class StockStatus(enum.Enum):
    out_of_stock = "out"
    low_stock = "low"
    available = "available"


@dataclass
class Product:
    id: str
    name: str = ""
    barcode: str = ""
    category: str = ""
    cost_price: float = 0.0
    sell_price: float = 0.0
    stock: int = 0
    min_stock: int = DEFAULT_MIN_STOCK
    date_added: datetime = field(default_factory=utcnow)
    last_updated: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "barcode": self.barcode,
            "category": self.category,
            "costPrice": self.cost_price,
            "sellPrice": self.sell_price,
            "stock": self.stock,
            "minStock": self.min_stock,
            "dateAdded": format_timestamp(self.date_added),
            "lastUpdated": format_timestamp(self.last_updated),
        }

    def merged(self, updates: Mapping[str, Any], now: datetime) -> "Product":
        changes = {key: value for key, value in updates.items() if key in EDITABLE_FIELDS}
        return replace(self, **changes, last_updated=now)


@dataclass(frozen=True)
class AppSettings:
    profit_margin: float = 30.0
    currency: str = "$"
    low_stock_alert: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "profitMargin": data["profit_margin"],
            "currency": data["currency"],
            "lowStockAlert": data["low_stock_alert"],
        }

