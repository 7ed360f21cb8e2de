"""Hold the loaded receipts and cache their aggregation per date range."""


import logging
from receipt_wrangler import aggregate, ingest, ranking


logger = logging.getLogger(__name__)


class Dashboard:
    """
    The loaded transactions plus the aggregation of the last requested
    date range. Loading new records or asking for a different range
    recomputes; anything else is served from the cache.
    """

    def __init__(self, transactions=()):
        self._transactions = tuple(transactions)
        self._cache_key = None
        self._cached = None

    @property
    def transactions(self):
        return self._transactions

    def load(self, records):
        """
        Replace the loaded transactions with decoded export records.

        Raises:
            ingest.IngestionError, leaving the current transactions intact
        """
        self._transactions = ingest.transactions(records)
        self._cache_key = None

    def clear(self):
        self._transactions = ()
        self._cache_key = None

    def aggregation(self, date_range):
        key = (id(self._transactions), date_range)
        if key != self._cache_key:
            logger.debug('recomputing for %s..%s', *date_range)
            self._cached = aggregate.summarize(self._transactions, date_range)
            self._cache_key = key
        return self._cached

    def search(self, query, date_range, limit=ranking.RECENT_LIMIT):
        return ranking.search_transactions(
            query, self.aggregation(date_range).transactions, limit)
