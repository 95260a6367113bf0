# src/app/infra/storage/s3_provider.py
"""
AWS S3 storage provider implementation.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.app.domain.errors import ObjectNotFoundError, StorageError
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


class S3StorageProvider(StorageProvider):
    """
    AWS S3 storage provider using boto3.

    Credentials fall back to boto3's default chain (env vars, shared
    config, instance role) when not passed explicitly.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Any = None,
    ):
        if not bucket_name:
            raise StorageError("Missing S3 configuration. Required: S3_BUCKET_NAME")

        self.bucket_name = bucket_name
        self.region = region

        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=Config(
                signature_version="s3v4",
                # Callers never retry; one attempt per logical operation
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

        logger.info(
            "S3StorageProvider initialized: bucket=%s, region=%s",
            self.bucket_name,
            self.region,
        )

    def object_exists(self, object_key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=self.bucket_name, Key=object_key)
            return True
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            logger.error("Error checking object existence: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to check object existence: {e}") from e
        except BotoCoreError as e:
            logger.error("Error checking object existence: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to check object existence: {e}") from e

    def read_object(self, object_key: str) -> bytes:
        """Download a whole object from S3 into memory."""
        try:
            response = self._client.get_object(Bucket=self.bucket_name, Key=object_key)
            body = response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                raise ObjectNotFoundError(object_key) from e
            logger.error("Failed to read from S3: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to read object: {e}") from e
        except BotoCoreError as e:
            logger.error("Failed to read from S3: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to read object: {e}") from e

        logger.debug("Read object: key=%s, size=%d bytes", object_key, len(body))
        return body

    def write_object(
        self,
        object_key: str,
        body: bytes,
        content_type: str,
    ) -> None:
        """Upload (create or overwrite) an object in S3."""
        try:
            self._client.put_object(
                Bucket=self.bucket_name,
                Key=object_key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to write to S3: key=%s, error=%s", object_key, e)
            raise StorageError(f"Failed to write object: {e}") from e

        logger.info(
            "Wrote object: key=%s, content_type=%s, size=%d bytes",
            object_key,
            content_type,
            len(body),
        )

    def public_url(self, object_key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{object_key}"
