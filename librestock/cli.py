import click

from .extensions import app_settings
from .inventory.filters import STOCK_FILTERS, ProductFilter
from .inventory.store import get_store
from .utils.analytics import dashboard_payload


def register_cli(app):
    @app.cli.command('init-sheet')
    def init_sheet():
        """Write the header row to the products sheet."""
        get_store().initialize_sheet()
        click.echo('Header row written.')

    @app.cli.command('list-products')
    @click.option('--search', default='')
    @click.option('--category', default='all')
    @click.option('--stock', type=click.Choice(STOCK_FILTERS), default='all')
    def list_products(search, category, stock):
        result = get_store().list_all()
        if result.error:
            click.echo(f'Warning: {result.error}', err=True)
        rows = ProductFilter(search=search, category=category, stock=stock).apply(result.products)
        currency = app_settings.get().currency
        for product in rows:
            click.echo(
                f'{product.id}\t{product.barcode}\t{product.name}\t{product.category}\t'
                f'{currency}{product.sell_price:.2f}\tstock={product.stock}/{product.min_stock}'
            )
        click.echo(f'Showing {len(rows)} of {len(result.products)} products')

    @app.cli.command('dashboard')
    def dashboard():
        result = get_store().list_all()
        if result.error:
            click.echo(f'Warning: {result.error}', err=True)
        stats = dashboard_payload(result.products, app_settings.get())
        formatted = stats['formatted']
        click.echo(f"Products: {stats['totalProducts']}")
        click.echo(f"Inventory value: {formatted['totalValue']}")
        click.echo(f"Expected revenue: {formatted['expectedRevenue']}")
        click.echo(f"Potential profit: {formatted['potentialProfit']} (margin {stats['profitMargin']}%)")
        click.echo(f"Average stock: {stats['averageStock']:.1f}")
        for entry in stats['topCategories']:
            click.echo(f"  {entry['category'] or '(none)'}: {entry['count']}")
        if stats['lowStockAlert']:
            click.echo(stats['lowStockAlert']['message'])
