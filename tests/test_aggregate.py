from decimal import Decimal
import pytest
from receipt_wrangler import aggregate, schema
from receipt_wrangler.schema import Date, DateRange, LineItem, Transaction


def _transaction(date, warehouse, total, items=(), count=None):
    return Transaction(
        Date.parse(date),
        warehouse,
        Decimal(total),
        Decimal('0'),
        len(items) if count is None else count,
        tuple(LineItem(desc, Decimal(amount), unit) for desc, amount, unit in items),
    )


def _paper_towels():
    return [
        _transaction('2023-01-05', 'A', '100',
                     [('Paper Towels', '50', 1), ('Refund', '-10', None)]),
        _transaction('2023-02-10', 'A', '80', [('Paper Towels', '55', 1)]),
    ]


def _range(start, end):
    return DateRange(Date.parse(start), Date.parse(end))


def test_paper_towels_scenario():
    a = aggregate.summarize(_paper_towels(), _range('2023-01-01', '2023-02-28'))
    assert a.total_spent == Decimal('180')
    assert a.total_visits == 2
    assert a.total_items == 3
    assert a.average_spend == Decimal('90')
    assert [(m.label, m.spent, m.visits) for m in a.monthly_data] == [
        ('Jan 2023', Decimal('100'), 1),
        ('Feb 2023', Decimal('80'), 1),
    ]
    assert a.item_stats['Paper Towels'] == \
        schema.ItemStat('Paper Towels', 2, Decimal('105'))
    assert [p.price for p in a.price_history['Paper Towels']] == \
        [Decimal('50'), Decimal('55')]
    assert a.price_history['Paper Towels'][0].formatted_date == 'Jan 5, 2023'


def test_refunds_are_not_purchases():
    a = aggregate.summarize(_paper_towels(), _range('2023-01-01', '2023-12-31'))
    assert 'Refund' not in a.item_stats
    assert 'Refund' not in a.price_history
    # still part of the transaction itself
    assert any(item.description == 'Refund'
               for t in a.transactions for item in t.items)


def test_zero_amount_items_are_skipped():
    ts = [_transaction('2023-01-05', 'A', '0', [('Free Sample', '0', None)])]
    a = aggregate.aggregate(ts)
    assert len(a.item_stats) == 0
    assert len(a.price_history) == 0


def test_monthly_sums_match_totals():
    ts = [
        _transaction('2022-12-30', 'A', '12.50'),
        _transaction('2023-01-02', 'B', '7.25'),
        _transaction('2023-01-20', 'A', '30'),
        _transaction('2023-03-01', 'C', '1.01'),
    ]
    a = aggregate.summarize(ts, _range('2022-01-01', '2023-12-31'))
    assert sum(m.spent for m in a.monthly_data) == a.total_spent
    assert sum(m.visits for m in a.monthly_data) == a.total_visits
    assert [m.label for m in a.monthly_data] == ['Dec 2022', 'Jan 2023', 'Mar 2023']


def test_months_sort_by_calendar_not_label():
    ts = [
        _transaction('2023-04-01', 'A', '1'),
        _transaction('2022-08-01', 'A', '1'),
    ]
    a = aggregate.summarize(ts, _range('2022-01-01', '2023-12-31'))
    assert [(m.year, m.month) for m in a.monthly_data] == [(2022, 8), (2023, 4)]


def test_inverted_range():
    a = aggregate.summarize(_paper_towels(), _range('2023-03-01', '2023-01-01'))
    assert a.total_visits == 0
    assert a.total_spent == 0
    assert a.average_spend == 0
    assert a.monthly_data == ()
    assert a.transactions == ()


def test_empty_input():
    a = aggregate.aggregate([])
    assert a.total_visits == 0
    assert a.average_spend == Decimal('0')
    assert len(a.item_stats) == 0
    assert len(a.warehouse_stats) == 0


def test_filter_inclusive_and_sorted():
    ts = [
        _transaction('2023-02-28', 'late', '1'),
        _transaction('2023-01-01', 'early', '1'),
        _transaction('2022-12-31', 'before', '1'),
        _transaction('2023-03-01', 'after', '1'),
    ]
    filtered = aggregate.filter_by_date(ts, _range('2023-01-01', '2023-02-28'))
    assert [t.warehouse_name for t in filtered] == ['early', 'late']


def test_filter_is_idempotent():
    ts = _paper_towels() + [_transaction('2024-01-01', 'B', '5')]
    date_range = _range('2023-01-01', '2023-12-31')
    once = aggregate.filter_by_date(ts, date_range)
    assert aggregate.filter_by_date(once, date_range) == once


def test_filter_keeps_same_day_order():
    ts = [
        _transaction('2023-01-05', 'first', '1'),
        _transaction('2023-01-05', 'second', '1'),
        _transaction('2023-01-04', 'earlier', '1'),
    ]
    filtered = aggregate.filter_by_date(ts, _range('2023-01-01', '2023-01-31'))
    assert [t.warehouse_name for t in filtered] == ['earlier', 'first', 'second']


def test_items_group_by_trimmed_description():
    ts = [
        _transaction('2023-01-05', 'A', '10', [('Milk ', '4', None)]),
        _transaction('2023-01-06', 'A', '10', [('  Milk', '5', 2)]),
    ]
    a = aggregate.aggregate(ts)
    assert list(a.item_stats) == ['Milk']
    assert a.item_stats['Milk'].count == 2
    assert [p.price for p in a.price_history['Milk']] == [Decimal('4'), Decimal('2.5')]


def test_warehouse_stats():
    ts = [
        _transaction('2023-01-01', 'A', '10'),
        _transaction('2023-01-02', 'B', '20'),
        _transaction('2023-01-03', 'A', '5'),
    ]
    a = aggregate.aggregate(ts)
    assert list(a.warehouse_stats) == ['A', 'B']
    assert a.warehouse_stats['A'] == schema.WarehouseStat('A', Decimal('15'), 2)
    assert a.warehouse_stats['B'] == schema.WarehouseStat('B', Decimal('20'), 1)


def test_transactions_are_newest_first():
    a = aggregate.summarize(_paper_towels(), _range('2023-01-01', '2023-12-31'))
    assert [str(t.transaction_date) for t in a.transactions] == \
        ['2023-02-10', '2023-01-05']


def test_aggregation_is_read_only():
    a = aggregate.aggregate(_paper_towels())
    with pytest.raises(TypeError):
        a.item_stats['Paper Towels'] = None
    with pytest.raises(AttributeError):
        a.total_spent = 0
