from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ..models import AppSettings


def sell_price(cost_price: float, profit_margin: float) -> float:
    return cost_price * (1 + profit_margin / 100)


def profit(cost_price: float, sale_price: float) -> float:
    return sale_price - cost_price


def realized_margin(cost_price: float, sale_price: float) -> float:
    """Profit as a percentage of cost; 0 when there is no cost to divide by."""
    if cost_price <= 0:
        return 0.0
    return profit(cost_price, sale_price) / cost_price * 100


@dataclass(frozen=True)
class PriceBreakdown:
    cost_price: float
    sell_price: float
    profit: float
    margin: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "costPrice": self.cost_price,
            "sellPrice": self.sell_price,
            "profit": self.profit,
            "margin": self.margin,
        }


def price_breakdown(cost_price: float, settings: AppSettings) -> PriceBreakdown:
    price = sell_price(cost_price, settings.profit_margin) if cost_price > 0 else 0.0
    return PriceBreakdown(
        cost_price=cost_price,
        sell_price=price,
        profit=profit(cost_price, price),
        margin=realized_margin(cost_price, price),
    )


def format_money(value: float, currency: str) -> str:
    return f"{currency}{value:.2f}"
