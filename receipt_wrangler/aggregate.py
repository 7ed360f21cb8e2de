"""Filter transactions to a date range and aggregate them in one pass."""


import logging
from decimal import Decimal
from types import MappingProxyType
from receipt_wrangler import schema


logger = logging.getLogger(__name__)


def filter_by_date(transactions, date_range):
    """
    Transactions dated within the inclusive range, oldest first.

    An inverted range yields nothing. The sort is stable so same-day
    transactions keep their input order.
    """
    within = [t for t in transactions if t.transaction_date in date_range]
    return sorted(within, key=lambda t: t.transaction_date)


class _Tally:
    """Mutable running sums, frozen into named tuples at the end."""

    def __init__(self):
        self.amount = Decimal('0')
        self.count = 0

    def add(self, amount):
        self.amount += amount
        self.count += 1


def aggregate(transactions):
    """
    Derive every summary view from chronologically sorted transactions.

    Dicts keep first-seen order, which the rankings rely on to break ties.
    """
    total_spent = Decimal('0')
    total_items = 0
    months = {}
    items = {}
    history = {}
    warehouses = {}

    for t in transactions:
        total_spent += t.total
        total_items += t.total_item_count

        date = t.transaction_date
        month_key = (date.year, date.month)
        if month_key not in months:
            months[month_key] = _Tally()
        months[month_key].add(t.total)

        for item in t.items:
            if not item.qualifies:
                continue
            key = item.key
            if key not in items:
                items[key] = _Tally()
                history[key] = []
            items[key].add(item.amount)
            history[key].append(schema.PriceHistoryPoint(
                date, item.unit_price, date.pretty()))

        if t.warehouse_name not in warehouses:
            warehouses[t.warehouse_name] = _Tally()
        warehouses[t.warehouse_name].add(t.total)

    total_visits = len(transactions)
    if total_visits:
        average_spend = total_spent / total_visits
    else:
        average_spend = Decimal('0')

    monthly_data = tuple(
        schema.MonthBucket(year, month,
                           schema.Date(year, month, 1).month_label(),
                           tally.amount, tally.count)
        for (year, month), tally in sorted(months.items())
    )
    item_stats = {key: schema.ItemStat(key, tally.count, tally.amount)
                  for key, tally in items.items()}
    warehouse_stats = {name: schema.WarehouseStat(name, tally.amount, tally.count)
                       for name, tally in warehouses.items()}

    logger.debug('aggregated %d transactions into %d months, %d items, %d warehouses',
                 total_visits, len(monthly_data), len(item_stats), len(warehouse_stats))

    return schema.Aggregation(
        total_spent=total_spent,
        total_items=total_items,
        total_visits=total_visits,
        average_spend=average_spend,
        monthly_data=monthly_data,
        item_stats=MappingProxyType(item_stats),
        price_history=MappingProxyType({key: tuple(points)
                                        for key, points in history.items()}),
        warehouse_stats=MappingProxyType(warehouse_stats),
        transactions=tuple(reversed(transactions)),
    )


def summarize(transactions, date_range):
    """Filter then aggregate; the whole recomputation for one date range."""
    return aggregate(filter_by_date(transactions, date_range))
