# src/app/infra/storage/memory_provider.py
"""
In-process storage provider, used by the test suite and for
STORAGE_BACKEND=memory local runs. Contents are lost on restart.
"""
from __future__ import annotations

import logging
import threading

from src.app.domain.errors import ObjectNotFoundError
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class InMemoryStorageProvider(StorageProvider):
    def __init__(self, base_url: str = "memory://bucket"):
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, tuple[bytes, str]] = {}
        # Guards the dict only; read-modify-write cycles are still unguarded
        self._lock = threading.Lock()

    def object_exists(self, object_key: str) -> bool:
        with self._lock:
            return object_key in self.objects

    def read_object(self, object_key: str) -> bytes:
        with self._lock:
            try:
                body, _ = self.objects[object_key]
            except KeyError:
                raise ObjectNotFoundError(object_key) from None
        return body

    def write_object(
        self,
        object_key: str,
        body: bytes,
        content_type: str,
    ) -> None:
        with self._lock:
            self.objects[object_key] = (bytes(body), content_type)
        logger.debug("Stored object in memory: key=%s, size=%d bytes", object_key, len(body))

    def content_type(self, object_key: str) -> str:
        with self._lock:
            try:
                return self.objects[object_key][1]
            except KeyError:
                raise ObjectNotFoundError(object_key) from None

    def public_url(self, object_key: str) -> str:
        return f"{self.base_url}/{object_key}"
