from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from ..models import Product
from .stock import is_low_stock, is_out_of_stock

ALL = "all"
STOCK_FILTERS = (ALL, "low", "out", "available")


@dataclass(frozen=True)
class ProductFilter:
    search: str = ""
    category: str = ALL
    stock: str = ALL

    def __post_init__(self) -> None:
        if self.stock not in STOCK_FILTERS:
            raise ValueError(f"Unknown stock filter {self.stock!r}; expected one of {', '.join(STOCK_FILTERS)}")

    def apply(self, products: Iterable[Product]) -> List[Product]:
        return [product for product in products if matches_filter(product, self)]


def _matches_search(product: Product, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return (
        needle in product.name.lower()
        or term in product.barcode
        or needle in product.category.lower()
    )


def _matches_stock(product: Product, stock_filter: str) -> bool:
    if stock_filter == "low":
        return is_low_stock(product)
    if stock_filter == "out":
        return is_out_of_stock(product)
    if stock_filter == "available":
        return not is_low_stock(product)
    return True


def matches_filter(product: Product, criteria: ProductFilter) -> bool:
    if not _matches_search(product, criteria.search):
        return False
    if criteria.category != ALL and product.category != criteria.category:
        return False
    return _matches_stock(product, criteria.stock)
