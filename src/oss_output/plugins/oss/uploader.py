# src/oss_output/plugins/oss/uploader.py
"""Upload of completed staging files to OSS.

Trust boundary:
    - Storage SDK calls = EXTERNAL SYSTEM -> wrap and convert to UploadError
    - Our own state = OUR CODE -> let it crash

The object put and the ACL update form one logical operation. If either
fails the whole upload fails and no object is left behind; the caller must
not advance partition state. No retry is attempted here.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from oss_output.contracts.enums import CannedAcl
from oss_output.contracts.errors import UploadError

if TYPE_CHECKING:
    from botocore.client import BaseClient

logger = structlog.get_logger(__name__)


class ObjectUploader:
    """Puts local files into one bucket and applies a canned ACL.

    By default the uploader owns its client exclusively and close() closes it.

    Args:
        client: S3-compatible client (see OssAuthConfig.create_client)
        bucket: Target bucket name
        canned_acl: Policy applied to every uploaded object
        owns_client: Whether close() should also close the client
    """

    def __init__(
        self,
        client: BaseClient,
        bucket: str,
        canned_acl: CannedAcl = CannedAcl.DEFAULT,
        *,
        owns_client: bool = True,
    ) -> None:
        self._client: BaseClient | None = client
        self._owns_client = owns_client
        self._bucket = bucket
        self._canned_acl = canned_acl

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload(self, local_path: Path, key: str) -> None:
        """Upload a local file to ``key`` and set its ACL.

        If the ACL update fails, the object just written is deleted so that
        no object with the wrong ACL survives the failure.

        Raises:
            UploadError: If reading the file, the put, or the ACL call fails.
        """
        client = self._client
        if client is None:
            raise UploadError(f"Uploader for bucket '{self._bucket}' is closed", bucket=self._bucket, key=key)

        start_time = time.perf_counter()
        try:
            size_bytes = local_path.stat().st_size
            with local_path.open("rb") as body:
                client.put_object(Bucket=self._bucket, Key=key, Body=body, ContentLength=size_bytes)
        except (BotoCoreError, ClientError, OSError) as e:
            raise self._upload_failed(key, e, start_time) from e

        try:
            client.put_object_acl(Bucket=self._bucket, Key=key, ACL=self._canned_acl.value)
        except (BotoCoreError, ClientError) as e:
            self._remove_object(client, key)
            raise self._upload_failed(key, e, start_time) from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "object_uploaded",
            bucket=self._bucket,
            key=key,
            size_bytes=size_bytes,
            canned_acl=self._canned_acl.value,
            latency_ms=round(latency_ms, 2),
        )

    def _upload_failed(self, key: str, error: Exception, start_time: float) -> UploadError:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            "object_upload_failed",
            bucket=self._bucket,
            key=key,
            error_type=type(error).__name__,
            error=str(error),
            latency_ms=round(latency_ms, 2),
        )
        return UploadError(
            f"Failed to put object '{key}' into bucket '{self._bucket}': {error}",
            bucket=self._bucket,
            key=key,
        )

    def _remove_object(self, client: BaseClient, key: str) -> None:
        """Best-effort delete of an object whose upload did not complete."""
        try:
            client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            # The upload error is what the caller sees
            logger.warning(
                "object_cleanup_failed",
                bucket=self._bucket,
                key=key,
                error_type=type(e).__name__,
                error=str(e),
            )

    def close(self) -> None:
        """Release the client. Idempotent."""
        client = self._client
        self._client = None
        if client is not None and self._owns_client:
            client.close()
