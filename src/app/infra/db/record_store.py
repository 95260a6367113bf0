# src/app/infra/db/record_store.py
"""
Collection-level persistence on top of a StorageProvider.

Each collection (e.g. "users/user.csv") is one CSV object. Every write goes
through ``mutate``: read the whole object, transform the records in memory,
overwrite the whole object.

There is no locking and no conditional write. Two concurrent ``mutate``
calls on the same key both read the same snapshot, and the second
overwrite discards whatever the first one appended or removed.
"""
from __future__ import annotations

import logging
from typing import Callable, Sequence

from src.app.domain.models import Record
from src.app.infra.db import csv_codec
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"

Mutation = Callable[[list[Record]], Sequence[Record]]


class RecordStore:
    def __init__(self, storage: StorageProvider):
        self._storage = storage

    def collection_exists(self, key: str) -> bool:
        return self._storage.object_exists(key)

    def load_collection(self, key: str) -> list[Record]:
        """Return all records of a collection; an absent collection is empty."""
        if not self._storage.object_exists(key):
            logger.debug("Collection %s does not exist yet", key)
            return []
        return csv_codec.decode_bytes(self._storage.read_object(key))

    def save_collection(self, key: str, records: Sequence[Record]) -> None:
        """Encode and unconditionally overwrite the collection object."""
        body = csv_codec.encode_bytes(records)
        self._storage.write_object(key, body, CSV_CONTENT_TYPE)
        logger.info("Saved collection %s: %d records", key, len(records))

    def mutate(self, key: str, fn: Mutation) -> list[Record]:
        """
        Load ``key``, apply ``fn`` and persist its result.

        ``fn`` receives a fresh list it may modify or replace, and may raise
        to abort the write (nothing is persisted in that case).

        Returns:
            The collection as written
        """
        current = self.load_collection(key)
        updated = list(fn(current))
        self.save_collection(key, updated)
        return updated
