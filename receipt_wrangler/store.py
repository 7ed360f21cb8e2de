"""
Keep the last loaded export in the working directory so later commands
can re-derive everything from it.
"""


from atomicwrites import atomic_write
from decimal import Decimal
import json
import logging
import os


logger = logging.getLogger(__name__)


def _encode_decimal(obj):
    # strings keep amounts exact; ingestion accepts numeric strings
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f'cannot store {type(obj).__name__}')


class Store:
    def __init__(self, root):
        self.path = os.path.join(root, 'receipts.json')

    def exists(self):
        return os.path.exists(self.path)

    def write_empty(self):
        with atomic_write(self.path, mode='w', overwrite=False) as f:
            f.write('[]')

    def read(self):
        with open(self.path) as f:
            return json.load(f, parse_float=Decimal)

    def write(self, records):
        text = json.dumps(records, default=_encode_decimal, indent=1)
        with atomic_write(self.path, mode='w', overwrite=True) as f:
            f.write(text)
        logger.info('stored %d receipts in %s', len(records), self.path)

    def clear(self):
        self.write([])
