"""Capability URL brokering against an S3-compatible object store."""

import asyncio
from typing import Any

import boto3
import structlog
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from eventcam.config import Config
from eventcam.core.modules.storage.models import CLIENT_METHODS, StorageOperation
from eventcam.errors import StorageCheckError, StorageDeleteError, StorageSignError

logger = structlog.get_logger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchKey"})


def create_storage_client(config: Config) -> Any:
    """Build the S3 client shared by the whole process.

    Path-style addressing and no automatic retries: storage failures surface to
    the caller immediately, bounded by the configured timeout.
    """
    session = boto3.session.Session()
    return session.client(
        service_name="s3",
        endpoint_url=config.storage_endpoint,
        aws_access_key_id=config.storage_access_key_id,
        aws_secret_access_key=config.storage_secret_access_key,
        region_name=config.storage_region,
        config=BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
            connect_timeout=config.external_timeout_seconds,
            read_timeout=config.external_timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


def _is_not_found(error: ClientError) -> bool:
    code = str(error.response.get("Error", {}).get("Code", ""))
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in NOT_FOUND_CODES or status == 404


class CapabilityUrlBroker:
    """Issues short-lived signed URLs and performs direct object checks.

    Holds no per-call state, one instance is shared by all requests.
    """

    def __init__(self, client: Any, default_ttl_seconds: int) -> None:
        self._client = client
        self.default_ttl_seconds = default_ttl_seconds

    def sign(self, bucket: str, object_path: str, operation: StorageOperation, ttl_seconds: int | None = None) -> str:
        """Return a presigned URL granting `operation` on one object.

        Raises:
            StorageSignError: If signing fails for any reason
        """
        expires_in = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        try:
            return str(
                self._client.generate_presigned_url(
                    ClientMethod=CLIENT_METHODS[operation],
                    Params={"Bucket": bucket, "Key": object_path},
                    ExpiresIn=expires_in,
                )
            )
        except Exception as e:
            logger.warning("storage_sign_failed", bucket=bucket, operation=operation, error=str(e))
            if operation == StorageOperation.WRITE:
                raise StorageSignError("Failed to create signed storage upload URL", cause=e) from e
            raise StorageSignError("Failed to create signed storage URL", cause=e) from e

    async def exists(self, bucket: str, object_path: str) -> bool:
        """Check whether an object exists. A missing object is a normal False.

        Raises:
            StorageCheckError: On any failure other than "not found"
        """
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=bucket, Key=object_path)
        except ClientError as e:
            if _is_not_found(e):
                return False
            logger.warning("storage_check_failed", bucket=bucket, error=str(e))
            raise StorageCheckError("Failed to verify object in storage", cause=e) from e
        except BotoCoreError as e:
            logger.warning("storage_check_failed", bucket=bucket, error=str(e))
            raise StorageCheckError("Failed to verify object in storage", cause=e) from e
        return True

    async def delete(self, bucket: str, object_path: str) -> None:
        """Delete an object.

        Raises:
            StorageDeleteError: If the backend rejects or fails the delete
        """
        try:
            await asyncio.to_thread(self._client.delete_object, Bucket=bucket, Key=object_path)
        except (ClientError, BotoCoreError) as e:
            logger.warning("storage_delete_failed", bucket=bucket, error=str(e))
            raise StorageDeleteError("Failed to delete object from storage", cause=e) from e
        logger.debug("storage_object_deleted", bucket=bucket, object_path=object_path)
