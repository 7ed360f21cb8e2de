"""receipt_wrangler CLI"""

import sys
import os
import logging
import click
from tabulate import tabulate
from receipt_wrangler.config import SettingsFile, ConfigError
from receipt_wrangler.dashboard import Dashboard
from receipt_wrangler.ingest import IngestionError
from receipt_wrangler.store import Store
from receipt_wrangler import ingest, ranking, report, schema


def _fatal(message):
    print('fatal: ' + message, file=sys.stderr)
    sys.exit(1)


def _assert_initialized():
    root = os.getcwd()
    if not SettingsFile(root).exists() or not Store(root).exists():
        _fatal('directory must be initialized with `receipt-wrangler init`')


def _settings():
    try:
        return SettingsFile(os.getcwd()).read()
    except ConfigError as e:
        _fatal(str(e))


def _dashboard():
    _assert_initialized()
    dashboard = Dashboard()
    try:
        dashboard.load(Store(os.getcwd()).read())
    except (IngestionError, ValueError) as e:
        _fatal(f'stored receipts are unreadable: {e}')
    return dashboard


def _parse_date(ctx, param, value):
    if value is None:
        return None
    try:
        return schema.Date.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def date_range_options(f):
    """Add --start/--end and pass the resolved `date_range` instead."""
    f = click.option('--end', callback=_parse_date,
                     help='Last day to include (YYYY-MM-DD), default today')(f)
    f = click.option('--start', callback=_parse_date,
                     help='First day to include (YYYY-MM-DD)')(f)
    return f


def _date_range(start, end, settings):
    default = schema.DateRange.last_years(settings.default_years)
    return schema.DateRange(start or default.start, end or default.end)


def _money(amount):
    return '${:,.2f}'.format(amount)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Log debug output.')
def cli(verbose):
    """Summarizes warehouse club purchase history."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')


@cli.command()
@click.argument('directory')
def init(directory):
    """Initialize a new receipt_wrangler directory"""
    os.makedirs(directory, exist_ok=True)
    try:
        SettingsFile(directory).write_boilerplate()
        Store(directory).write_empty()
    except FileExistsError:
        _fatal(f'"{directory}" is already initialized')


@cli.command()
@click.argument('file', type=click.File('r'))
def load(file):
    """Load an exported purchase history JSON file"""
    _assert_initialized()
    try:
        records = ingest.decode(file)
        count = len(ingest.transactions(records))
    except IngestionError as e:
        _fatal(f'{file.name} is not a valid purchase history export: {e}')
    Store(os.getcwd()).write(records)
    print(f'loaded {count} receipts')


@cli.command()
def clear():
    """Forget the loaded receipts"""
    _assert_initialized()
    Store(os.getcwd()).clear()


@cli.command()
@date_range_options
def summary(start, end):
    """Totals for the date range"""
    settings = _settings()
    date_range = _date_range(start, end, settings)
    a = _dashboard().aggregation(date_range)
    print(f'{date_range.start} to {date_range.end}')
    print(tabulate([
        ('Total Spent', _money(a.total_spent)),
        ('Total Visits', a.total_visits),
        ('Avg Spend / Visit', _money(a.average_spend)),
        ('Total Items', a.total_items),
    ]))


@cli.command()
@date_range_options
def months(start, end):
    """Spending per month"""
    a = _dashboard().aggregation(_date_range(start, end, _settings()))
    rows = [(m.label, m.visits, _money(m.spent)) for m in a.monthly_data]
    print(tabulate(rows, headers=['month', 'visits', 'spent']))


@cli.command()
@click.option('--by', type=click.Choice(['count', 'spent']), default='spent',
              help='Rank by number of purchases or by money spent.')
@date_range_options
def top(by, start, end):
    """Most bought items"""
    settings = _settings()
    a = _dashboard().aggregation(_date_range(start, end, settings))
    if by == 'count':
        stats = ranking.top_items_by_count(a, settings.top_n)
    else:
        stats = ranking.top_items_by_spent(a, settings.top_n)
    rows = [(s.name, s.count, _money(s.total)) for s in stats]
    print(tabulate(rows, headers=['item', 'purchases', 'spent']))


@cli.command()
@date_range_options
def warehouses(start, end):
    """Spending per warehouse"""
    a = _dashboard().aggregation(_date_range(start, end, _settings()))
    rows = [(w.name, w.visits, _money(w.spent))
            for w in ranking.warehouse_ranking(a)]
    print(tabulate(rows, headers=['warehouse', 'visits', 'spent']))


@cli.command()
@date_range_options
def items(start, end):
    """Items with a price history"""
    a = _dashboard().aggregation(_date_range(start, end, _settings()))
    print('\n'.join(ranking.eligible_items(a)))


@cli.command()
@click.argument('item')
@date_range_options
def history(item, start, end):
    """Price history of one item"""
    a = _dashboard().aggregation(_date_range(start, end, _settings()))
    points = ranking.price_history_for(a, item.strip())
    if points is None:
        _fatal(f'item not found or insufficient data: {item}')
    rows = [(p.formatted_date, _money(p.price)) for p in points]
    print(tabulate(rows, headers=['date', 'unit price']))


def _transaction_rows(transactions):
    return [(i, t.transaction_date.pretty(), t.warehouse_name,
             t.total_item_count, _money(t.total))
            for i, t in transactions]


@cli.command()
@click.argument('query', default='')
@date_range_options
def search(query, start, end):
    """Search transactions by warehouse or item"""
    settings = _settings()
    a = _dashboard().aggregation(_date_range(start, end, settings))
    found = ranking.search_transactions(query, a.transactions,
                                        settings.recent_limit)
    if len(found) == 0:
        print(f'No transactions found matching "{query}"')
        return
    # number rows by their position so `show` can find them again
    found_ids = {id(t) for t in found}
    numbered = [(i, t) for i, t in enumerate(a.transactions) if id(t) in found_ids]
    print(tabulate(_transaction_rows(numbered),
                   headers=['#', 'date', 'warehouse', 'items', 'total']))


@cli.command()
@click.argument('index', type=int)
@date_range_options
def show(index, start, end):
    """Line items of one transaction, numbered as in `search`"""
    a = _dashboard().aggregation(_date_range(start, end, _settings()))
    detail = ranking.transaction_detail(a, index)
    if detail is None:
        _fatal(f'no transaction #{index} in this date range')
    t = detail.transaction
    print(f'{t.transaction_date.pretty()} - {t.warehouse_name}')
    print(tabulate([
        ('Total', _money(t.total)),
        ('Items', t.total_item_count),
        ('Taxes', _money(t.taxes)),
    ]))
    print()
    rows = [(row.description + ('*' if row.has_history else ''),
             row.secondary_description,
             _money(row.unit_price),
             _money(row.amount))
            for row in detail.rows]
    print(tabulate(rows, headers=['item', '', 'unit price', 'amount']))
    if any(row.has_history for row in detail.rows):
        print('\n* see `receipt-wrangler history ITEM`')


@cli.command(name='report')
@date_range_options
def report_cmd(start, end):
    """Write an HTML report"""
    settings = _settings()
    a = _dashboard().aggregation(_date_range(start, end, settings))
    print(report.generate(os.getcwd(), a, settings))


if __name__ == '__main__':
    cli()
