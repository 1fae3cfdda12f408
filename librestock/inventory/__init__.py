from .filters import STOCK_FILTERS, ProductFilter, matches_filter
from .pricing import PriceBreakdown, price_breakdown, profit, realized_margin, sell_price
from .stock import classify_stock, is_low_stock, is_out_of_stock
from .store import ListResult, ProductNotFound, ProductStore, get_store

__all__ = [
    "STOCK_FILTERS",
    "ListResult",
    "PriceBreakdown",
    "ProductFilter",
    "ProductNotFound",
    "ProductStore",
    "classify_stock",
    "get_store",
    "is_low_stock",
    "is_out_of_stock",
    "matches_filter",
    "price_breakdown",
    "profit",
    "realized_margin",
    "sell_price",
]
