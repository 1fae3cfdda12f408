from __future__ import annotations

from ..models import Product, StockStatus


def is_out_of_stock(product: Product) -> bool:
    return product.stock == 0


def is_low_stock(product: Product) -> bool:
    # Inclusive: sitting exactly at the minimum already needs a reorder.
    return product.stock <= product.min_stock


def classify_stock(product: Product) -> StockStatus:
    if is_out_of_stock(product):
        return StockStatus.out_of_stock
    if is_low_stock(product):
        return StockStatus.low_stock
    return StockStatus.available
