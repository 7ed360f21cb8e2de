from decimal import Decimal
import pytest
from receipt_wrangler import schema


def test_date_parse():
    assert schema.Date.parse('2023-01-05') == schema.Date(2023, 1, 5)
    assert schema.Date.parse('2023-01-05T13:45:00') == schema.Date(2023, 1, 5)


def test_date_parse_rejects_garbage():
    for text in ['', '2023/01/05', '05-01-2023x', '2023-02-30', 'yesterday']:
        with pytest.raises(ValueError):
            schema.Date.parse(text)


def test_date_compare():
    a = schema.Date(1995, 9, 9)
    b = schema.Date(1999, 2, 2)
    c = schema.Date(2000, 1, 1)
    assert a < b < c
    assert a <= b <= c
    assert c > b > a
    assert c >= b >= a
    assert a == a and b == b and c == c


def test_date_str_repr():
    date = schema.Date(1995, 1, 2)
    assert str(date) == '1995-01-02'
    assert eval(repr(date), {'Date': schema.Date}) == date


def test_date_labels():
    date = schema.Date(2023, 1, 5)
    assert date.month_label() == 'Jan 2023'
    assert date.pretty() == 'Jan 5, 2023'


def test_years_ago_clamps_leap_day():
    assert schema.Date(2024, 2, 29).years_ago(1) == schema.Date(2023, 2, 28)
    assert schema.Date(2023, 6, 15).years_ago(2) == schema.Date(2021, 6, 15)


def test_date_range_inclusive():
    date_range = schema.DateRange(schema.Date(2023, 1, 1), schema.Date(2023, 2, 28))
    assert schema.Date(2023, 1, 1) in date_range
    assert schema.Date(2023, 2, 28) in date_range
    assert schema.Date(2022, 12, 31) not in date_range
    assert schema.Date(2023, 3, 1) not in date_range


def test_inverted_date_range_contains_nothing():
    date_range = schema.DateRange(schema.Date(2023, 3, 1), schema.Date(2023, 1, 1))
    assert schema.Date(2023, 2, 1) not in date_range
    assert schema.Date(2023, 1, 1) not in date_range


def test_last_years():
    today = schema.Date(2024, 5, 10)
    assert schema.DateRange.last_years(1, today) == \
        schema.DateRange(schema.Date(2023, 5, 10), today)


def test_line_item_key_is_trimmed():
    item = schema.LineItem('  Paper Towels ', Decimal('19.99'))
    assert item.key == 'Paper Towels'


def test_line_item_qualifies():
    assert schema.LineItem('a', Decimal('0.01')).qualifies
    assert not schema.LineItem('a', Decimal('0')).qualifies
    assert not schema.LineItem('a', Decimal('-3.00')).qualifies


def test_unit_price():
    assert schema.LineItem('a', Decimal('10'), 4).unit_price == Decimal('2.5')
    assert schema.LineItem('a', Decimal('10'), None).unit_price == Decimal('10')
    # zero units read as one unit
    assert schema.LineItem('a', Decimal('10'), 0).unit_price == Decimal('10')
