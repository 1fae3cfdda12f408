from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..inventory.pricing import format_money
from ..inventory.stock import is_low_stock, is_out_of_stock
from ..models import AppSettings, Product

TOP_CATEGORY_COUNT = 3


@dataclass
class DashboardStats:
    total_products: int = 0
    total_value: float = 0.0
    expected_revenue: float = 0.0
    low_stock_products: List[Product] = field(default_factory=list)
    out_of_stock_products: List[Product] = field(default_factory=list)
    category_histogram: Dict[str, int] = field(default_factory=dict)
    stock_total: int = 0

    @property
    def potential_profit(self) -> float:
        return self.expected_revenue - self.total_value

    @property
    def average_stock(self) -> float:
        if not self.total_products:
            return 0.0
        return self.stock_total / self.total_products

    @property
    def top_categories(self) -> List[Tuple[str, int]]:
        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(self.category_histogram.items(), key=lambda entry: entry[1], reverse=True)
        return ranked[:TOP_CATEGORY_COUNT]


def aggregate(products: Iterable[Product]) -> DashboardStats:
    stats = DashboardStats()
    for product in products:
        stats.total_products += 1
        stats.total_value += product.cost_price * product.stock
        stats.expected_revenue += product.sell_price * product.stock
        stats.stock_total += product.stock
        stats.category_histogram[product.category] = stats.category_histogram.get(product.category, 0) + 1
        if is_low_stock(product):
            stats.low_stock_products.append(product)
        if is_out_of_stock(product):
            stats.out_of_stock_products.append(product)
    return stats


def average_stock(products: Iterable[Product]) -> float:
    return aggregate(products).average_stock


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def low_stock_alert(stats: DashboardStats, settings: AppSettings) -> Optional[Dict[str, Any]]:
    low = len(stats.low_stock_products)
    if not settings.low_stock_alert or low == 0:
        return None
    out = len(stats.out_of_stock_products)
    message = f"{_plural(low, 'product')} with low stock."
    if out:
        message += f" {_plural(out, 'product')} out of stock."
    return {"count": low, "outOfStock": out, "message": message}


def dashboard_payload(products: Iterable[Product], settings: AppSettings) -> Dict[str, Any]:
    stats = aggregate(products)
    currency = settings.currency
    return {
        "totalProducts": stats.total_products,
        "totalValue": stats.total_value,
        "expectedRevenue": stats.expected_revenue,
        "potentialProfit": stats.potential_profit,
        "averageStock": stats.average_stock,
        "lowStockCount": len(stats.low_stock_products),
        "outOfStockCount": len(stats.out_of_stock_products),
        "lowStockProducts": [product.to_dict() for product in stats.low_stock_products],
        "outOfStockProducts": [product.to_dict() for product in stats.out_of_stock_products],
        "categories": stats.category_histogram,
        "topCategories": [{"category": name, "count": count} for name, count in stats.top_categories],
        "currency": currency,
        "profitMargin": settings.profit_margin,
        "formatted": {
            "totalValue": format_money(stats.total_value, currency),
            "expectedRevenue": format_money(stats.expected_revenue, currency),
            "potentialProfit": format_money(stats.potential_profit, currency),
        },
        "lowStockAlert": low_stock_alert(stats, settings),
    }
