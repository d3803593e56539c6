"""
Key-value store adapters.

Both adapters offer the same contract: ``get(key)``, ``set(key, value)`` and
``scan_by_prefix(prefix)``. Values are JSON-serializable dicts. A scan returns
values in no particular order. Failures surface as ``StorageError``.
"""
import copy
import json
import logging
import threading

from sqlalchemy.exc import SQLAlchemyError

from donorapp.errors import StorageError
from donorapp.extensions import db
from donorapp.models.kv_entry_model import KVEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Interface for the key-value stores used by the donation handlers."""

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def scan_by_prefix(self, prefix):
        raise NotImplementedError


class SQLAlchemyKeyValueStore(KeyValueStore):
    """Stores each key as one row of the ``kv_store`` table."""

    def get(self, key):
        try:
            entry = db.session.get(KVEntry, key)
            return copy.deepcopy(entry.value) if entry else None
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("kv get failed for %s: %s", key, e)
            raise StorageError(f'Failed to read {key}') from e

    def set(self, key, value):
        try:
            db.session.merge(KVEntry(key=key, value=copy.deepcopy(value)))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("kv set failed for %s: %s", key, e)
            raise StorageError(f'Failed to write {key}') from e

    def scan_by_prefix(self, prefix):
        try:
            entries = KVEntry.query.filter(KVEntry.key.startswith(prefix, autoescape=True)).all()
            return [copy.deepcopy(entry.value) for entry in entries]
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("kv scan failed for prefix %s: %s", prefix, e)
            raise StorageError(f'Failed to scan {prefix}') from e


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store with the same contract as the SQL-backed one."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            value = self._data.get(key)
        return copy.deepcopy(value)

    def set(self, key, value):
        try:
            # Serialize on write so non-JSON values fail like they would in the database
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f'Failed to write {key}') from e
        with self._lock:
            self._data[key] = json.loads(encoded)

    def scan_by_prefix(self, prefix):
        with self._lock:
            values = [value for key, value in self._data.items() if key.startswith(prefix)]
        return copy.deepcopy(values)

    def __len__(self):
        return len(self._data)


def create_store(backend):
    if backend == 'memory':
        return InMemoryKeyValueStore()
    if backend == 'sql':
        return SQLAlchemyKeyValueStore()
    raise ValueError(f'Unknown store backend: {backend}')
