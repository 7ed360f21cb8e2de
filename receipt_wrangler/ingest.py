"""Turn a decoded purchase-history export into schema.Transactions."""


import json
import logging
from decimal import Decimal, InvalidOperation
from receipt_wrangler import schema


logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """The export does not match the expected receipt schema."""


def _money(value, field):
    # bools are ints in python but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise IngestionError(f'{field} must be numeric, got {value!r}')
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise IngestionError(f'{field} must be numeric, got {value!r}') from None
    if not amount.is_finite():
        raise IngestionError(f'{field} must be finite, got {value!r}')
    return amount


def _count(value, field):
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise IngestionError(f'{field} must be a whole number, got {value!r}')
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise IngestionError(f'{field} must be a whole number, got {value!r}') from None
    if not number.is_finite() or number != number.to_integral_value():
        raise IngestionError(f'{field} must be a whole number, got {value!r}')
    return int(number)


def _text(value, field):
    if not isinstance(value, str):
        raise IngestionError(f'{field} must be a string, got {value!r}')
    return value


def _require(record, field, where):
    if not isinstance(record, dict):
        raise IngestionError(f'{where} must be an object')
    try:
        return record[field]
    except KeyError:
        raise IngestionError(f'{where} is missing {field}') from None


def _line_item(raw, where):
    description = _text(_require(raw, 'itemDescription01', where),
                        f'{where}.itemDescription01')
    amount = _money(_require(raw, 'amount', where), f'{where}.amount')
    unit = raw.get('unit')
    if unit is not None:
        unit = _money(unit, f'{where}.unit')
    secondary = _text(raw.get('itemDescription02') or '',
                      f'{where}.itemDescription02')
    return schema.LineItem(description, amount, unit, secondary)


def _transaction(raw, where):
    date_string = _require(raw, 'transactionDate', where)
    try:
        date = schema.Date.parse(date_string)
    except (TypeError, ValueError) as e:
        raise IngestionError(f'{where}.transactionDate: {e}') from e
    items = _require(raw, 'itemArray', where)
    if not isinstance(items, list):
        raise IngestionError(f'{where}.itemArray must be a list')
    return schema.Transaction(
        date,
        _text(_require(raw, 'warehouseName', where), f'{where}.warehouseName'),
        _money(_require(raw, 'total', where), f'{where}.total'),
        _money(_require(raw, 'taxes', where), f'{where}.taxes'),
        _count(_require(raw, 'totalItemCount', where), f'{where}.totalItemCount'),
        tuple(_line_item(item, f'{where}.itemArray[{j}]')
              for j, item in enumerate(items)),
    )


def transactions(records):
    """
    Validate decoded export records and convert them to Transactions.

    Raises:
        IngestionError
    """
    if not isinstance(records, list):
        raise IngestionError('expected a list of receipts')
    result = tuple(_transaction(raw, f'receipt[{i}]')
                   for i, raw in enumerate(records))
    logger.debug('ingested %d transactions', len(result))
    return result


def decode(fileobj):
    """
    Decode an export file, keeping exact decimal amounts.

    Raises:
        IngestionError
    """
    try:
        return json.load(fileobj, parse_float=Decimal)
    except ValueError as e:
        raise IngestionError(f'not valid JSON: {e}') from e
