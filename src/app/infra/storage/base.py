# src/app/infra/storage/base.py
"""
Abstract base class for storage providers.
This interface allows easy swapping between different storage backends (S3, R2, in-memory, etc.)
"""
from __future__ import annotations

import os
import re
import time
from abc import ABC, abstractmethod
from typing import Optional


class StorageProvider(ABC):
    """
    Abstract interface for whole-object storage operations.

    Every write replaces the full object; there are no partial or append
    writes, and nothing is cached locally.

    Implementations:
    - S3StorageProvider: AWS S3 via boto3
    - InMemoryStorageProvider: dict-backed, for tests and local runs
    """

    @abstractmethod
    def object_exists(self, object_key: str) -> bool:
        """
        Check if an object exists in storage.

        Args:
            object_key: The key/path of the object

        Returns:
            True if the object exists
        """
        pass

    @abstractmethod
    def read_object(self, object_key: str) -> bytes:
        """
        Read a whole object.

        Args:
            object_key: The key/path of the object

        Returns:
            The object body

        Raises:
            ObjectNotFoundError: If the object does not exist
            StorageError: On any other storage failure
        """
        pass

    @abstractmethod
    def write_object(
        self,
        object_key: str,
        body: bytes,
        content_type: str,
    ) -> None:
        """
        Create or fully replace an object.

        Args:
            object_key: The key/path where the object will be stored
            body: Object contents
            content_type: MIME type of the content (e.g., "text/csv")
        """
        pass

    @abstractmethod
    def public_url(self, object_key: str) -> str:
        """Public URL under which the object can be fetched."""
        pass

    def generate_object_key(
        self,
        filename: str,
        prefix: str,
        now_ms: Optional[int] = None,
    ) -> str:
        """
        Generate a collision-resistant key for an uploaded file.

        Format: {prefix}/{epoch_millis}_{sanitized_basename}

        Args:
            filename: Original filename as sent by the client
            prefix: Path prefix (e.g. "recipes/images")
            now_ms: Timestamp override (for testing)

        Returns:
            The generated object key
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        # Strip client-side directories (either separator), then unsafe characters
        basename = os.path.basename(filename.replace("\\", "/"))
        safe_filename = re.sub(r"[^a-zA-Z0-9._-]", "_", basename) or "upload"
        if len(safe_filename) > 100:
            name, ext = os.path.splitext(safe_filename)
            safe_filename = name[:95] + ext

        return f"{prefix.rstrip('/')}/{now_ms}_{safe_filename}"
