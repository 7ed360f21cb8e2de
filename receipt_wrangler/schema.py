"""The schema for ingested receipts and the views derived from them."""


import calendar
import datetime
from decimal import Decimal
from functools import total_ordering
from typing import Any, Mapping, NamedTuple, Optional, Tuple


@total_ordering
class Date:
    """
    Calendar dates without a time of day. Formatted YYYY-MM-DD.
    """
    def __init__(self, year, month, day):
        # raises ValueError on impossible dates like 2023-02-30
        datetime.date(int(year), int(month), int(day))
        self.value = (int(year), int(month), int(day))

    @classmethod
    def parse(cls, text):
        """
        Parse 'YYYY-MM-DD', ignoring any 'T...' time suffix.

        Raises:
            ValueError
        """
        date_string = str(text).split('T')[0]
        parts = date_string.split('-')
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise ValueError('not a YYYY-MM-DD date: {!r}'.format(text))
        return cls(*parts)

    @classmethod
    def today(cls):
        now = datetime.date.today()
        return cls(now.year, now.month, now.day)

    @property
    def year(self):
        return self.value[0]

    @property
    def month(self):
        return self.value[1]

    @property
    def day(self):
        return self.value[2]

    def month_label(self):
        return '{} {:04}'.format(calendar.month_abbr[self.month], self.year)

    def pretty(self):
        return '{} {}, {:04}'.format(calendar.month_abbr[self.month],
                                     self.day, self.year)

    def years_ago(self, years):
        year = self.year - years
        day = min(self.day, calendar.monthrange(year, self.month)[1])
        return Date(year, self.month, day)

    def __str__(self):
        return '{:04}-{:02}-{:02}'.format(*self.value)

    def __repr__(self):
        template = 'Date({!r}, {!r}, {!r})'
        return template.format(*self.value)

    def __eq__(self, other):
        if not isinstance(other, Date):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other):
        if not isinstance(other, Date):
            return NotImplemented
        return self.value < other.value

    def __hash__(self):
        return self.value.__hash__()


class DateRange(NamedTuple):
    """An inclusive interval of dates. Empty when start is after end."""
    start: Date
    end: Date

    @classmethod
    def last_years(cls, years, today=None):
        today = today or Date.today()
        return cls(today.years_ago(years), today)

    def __contains__(self, date):
        return self.start <= date <= self.end


class LineItem(NamedTuple):
    description: str
    amount: Decimal
    unit: Optional[Any] = None
    secondary_description: str = ''

    @property
    def key(self):
        """The trimmed description that groups items across receipts."""
        return self.description.strip()

    @property
    def qualifies(self):
        """Refunds and discounts are not purchases."""
        return self.amount > 0

    @property
    def unit_price(self):
        # a unit of 0 is treated the same as a missing unit
        return self.amount / (self.unit or 1)


class Transaction(NamedTuple):
    transaction_date: Date
    warehouse_name: str
    total: Decimal
    taxes: Decimal
    total_item_count: int
    items: Tuple[LineItem, ...] = ()


class MonthBucket(NamedTuple):
    year: int
    month: int
    label: str
    spent: Decimal
    visits: int


class ItemStat(NamedTuple):
    name: str
    count: int
    total: Decimal


class PriceHistoryPoint(NamedTuple):
    date: Date
    price: Decimal
    formatted_date: str


class WarehouseStat(NamedTuple):
    name: str
    spent: Decimal
    visits: int


class Aggregation(NamedTuple):
    """Everything derived from one date-filtered set of transactions."""
    total_spent: Decimal
    total_items: int
    total_visits: int
    average_spend: Decimal
    monthly_data: Tuple[MonthBucket, ...]
    item_stats: Mapping[str, ItemStat]
    price_history: Mapping[str, Tuple[PriceHistoryPoint, ...]]
    warehouse_stats: Mapping[str, WarehouseStat]
    # most recent first
    transactions: Tuple[Transaction, ...]


class DetailRow(NamedTuple):
    description: str
    secondary_description: str
    unit_price: Decimal
    amount: Decimal
    has_history: bool


class TransactionDetail(NamedTuple):
    transaction: Transaction
    rows: Tuple[DetailRow, ...]
