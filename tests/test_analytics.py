from librestock.models import AppSettings
from librestock.utils.analytics import aggregate, average_stock, dashboard_payload, low_stock_alert

from .conftest import make_product


def test_totals():
    products = [
        make_product(id="a", cost_price=10, sell_price=13, stock=5),
        make_product(id="b", cost_price=20, sell_price=26, stock=2),
    ]
    stats = aggregate(products)
    assert stats.total_products == 2
    assert stats.total_value == 90
    assert stats.expected_revenue == 117
    assert stats.potential_profit == 27


def test_average_stock():
    assert average_stock([]) == 0
    assert average_stock([make_product(stock=10), make_product(stock=20)]) == 15


def test_top_categories_keep_first_seen_order_on_ties():
    products = [make_product(id=str(i), category=c) for i, c in enumerate(["A", "A", "B", "B", "B", "C"])]
    assert aggregate(products).top_categories == [("B", 3), ("A", 2), ("C", 1)]

    tied = [make_product(id=str(i), category=c) for i, c in enumerate(["X", "Y", "Z", "W"])]
    assert aggregate(tied).top_categories == [("X", 1), ("Y", 1), ("Z", 1)]


def test_low_and_out_of_stock_subsets():
    products = [
        make_product(id="empty", stock=0, min_stock=5),
        make_product(id="edge", stock=5, min_stock=5),
        make_product(id="fine", stock=9, min_stock=5),
    ]
    stats = aggregate(products)
    assert [p.id for p in stats.low_stock_products] == ["empty", "edge"]
    assert [p.id for p in stats.out_of_stock_products] == ["empty"]


def test_alert_respects_setting():
    stats = aggregate([make_product(stock=0), make_product(id="x", stock=1)])
    assert low_stock_alert(stats, AppSettings(low_stock_alert=False)) is None

    alert = low_stock_alert(stats, AppSettings(low_stock_alert=True))
    assert alert["count"] == 2
    assert alert["outOfStock"] == 1
    assert alert["message"] == "2 products with low stock. 1 product out of stock."


def test_no_alert_when_everything_is_stocked():
    stats = aggregate([make_product(stock=50)])
    assert low_stock_alert(stats, AppSettings()) is None


def test_dashboard_payload_formats_money():
    payload = dashboard_payload([make_product(cost_price=10, sell_price=13, stock=5, min_stock=2)], AppSettings(currency="€"))
    assert payload["formatted"]["totalValue"] == "€50.00"
    assert payload["formatted"]["potentialProfit"] == "€15.00"
    assert payload["topCategories"] == [{"category": "Ficción", "count": 1}]
    assert payload["lowStockAlert"] is None
