"""
Views selected from an aggregation: rankings, price history lookups and
transaction search. Nothing here reads raw records or keeps state; the
caller owns the current query and selection.
"""


from receipt_wrangler import schema


TOP_N = 10
RECENT_LIMIT = 10


def _top(stats, metric, n):
    # sorted() is stable with reverse=True, so ties keep first-seen order
    return sorted(stats, key=metric, reverse=True)[:n]


def top_items_by_count(aggregation, n=TOP_N):
    return _top(aggregation.item_stats.values(), lambda s: s.count, n)


def top_items_by_spent(aggregation, n=TOP_N):
    return _top(aggregation.item_stats.values(), lambda s: s.total, n)


def warehouse_ranking(aggregation):
    return sorted(aggregation.warehouse_stats.values(),
                  key=lambda w: w.spent, reverse=True)


def _has_trend(points):
    return points is not None and len(points) > 1


def eligible_items(aggregation):
    """Item keys seen at more than one price point, alphabetically."""
    return sorted(key for key, points in aggregation.price_history.items()
                  if _has_trend(points))


def price_history_for(aggregation, key):
    """
    The price points for an item key, or None if the key is unknown or
    the item was bought only once.
    """
    points = aggregation.price_history.get(key)
    if not _has_trend(points):
        return None
    return points


def _matches(transaction, needle):
    if needle in transaction.warehouse_name.lower():
        return True
    return any(needle in item.description.lower()
               for item in transaction.items)


def search_transactions(query, transactions, limit=RECENT_LIMIT):
    """
    With an empty query, the first `limit` transactions (the most recent
    ones, given newest-first input). Otherwise every transaction whose
    warehouse or any item description contains the query, ignoring case.
    """
    if not query:
        return list(transactions[:limit])
    needle = query.lower()
    return [t for t in transactions if _matches(t, needle)]


def transaction_detail(aggregation, index):
    """
    Line-by-line view of the index-th most recent transaction, or None.
    Refunds are listed but never linked to a price history.
    """
    if not 0 <= index < len(aggregation.transactions):
        return None
    transaction = aggregation.transactions[index]
    rows = tuple(
        schema.DetailRow(
            item.description,
            item.secondary_description,
            item.unit_price,
            item.amount,
            item.qualifies and price_history_for(aggregation, item.key) is not None,
        )
        for item in transaction.items
    )
    return schema.TransactionDetail(transaction, rows)
