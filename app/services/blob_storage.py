"""
Object storage for direct-to-storage uploads.

The browser (or the Python client) never streams large media through the
API: it asks for an upload token, POSTs the file straight to S3 and then
hands the resulting ``blobUrl`` to the analysis endpoint, which downloads
it to a temporary file.
"""
import logging
import re
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import (
    BLOB_ALLOWED_CONTENT_TYPES,
    BLOB_DOWNLOAD_BASE_DELAY,
    BLOB_DOWNLOAD_MAX_ATTEMPTS,
    BLOB_DOWNLOAD_TIMEOUT,
    BLOB_KEY_PREFIX,
    BLOB_MAX_SIZE_BYTES,
    PRESIGNED_URL_EXPIRES_SECONDS,
)
from ..utils.api_helpers import BlobStorageError, TransientAPIError, retry_with_backoff

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_name(name: Optional[str], default: str = "upload") -> str:
    """Keep only the base name, with characters that are safe in keys and paths."""
    base = Path(name or "").name
    cleaned = _UNSAFE_NAME_CHARS.sub("-", base).strip("-.")
    return cleaned or default


class BlobStorage:
    """S3-backed blob store issuing presigned upload tokens."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        max_size_bytes: int = BLOB_MAX_SIZE_BYTES,
        allowed_content_types: Iterable[str] = BLOB_ALLOWED_CONTENT_TYPES,
        download_attempts: int = BLOB_DOWNLOAD_MAX_ATTEMPTS,
        download_base_delay: float = BLOB_DOWNLOAD_BASE_DELAY,
        s3_client: Optional[Any] = None,
        http: Optional[requests.Session] = None,
    ):
        if not bucket:
            raise ValueError("BLOB_BUCKET not configured in environment variables")
        self.bucket = bucket
        self.max_size_bytes = max_size_bytes
        self.allowed_content_types = tuple(allowed_content_types)
        self.download_attempts = download_attempts
        self.download_base_delay = download_base_delay
        self._s3 = s3_client or boto3.client("s3", region_name=region)
        self._http = http or requests.Session()

    # ------------------------------------------------------------------
    # Upload tokens
    # ------------------------------------------------------------------

    def issue_upload_token(
        self,
        pathname: str,
        content_type: str,
        size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Authorize one direct upload.

        Returns:
            Dict with ``url`` and ``fields`` for a multipart POST to S3, the
            object ``key`` and a presigned ``blobUrl`` to read it back.

        Raises:
            ValueError: If the content type or declared size is not allowed
            BlobStorageError: If S3 refuses to sign the request
        """
        if content_type not in self.allowed_content_types:
            raise ValueError(
                f"Content type {content_type} is not allowed. "
                f"Allowed types: {', '.join(self.allowed_content_types)}"
            )
        if size is not None and size > self.max_size_bytes:
            raise ValueError(
                f"File is too large ({size} bytes). Maximum size is {self.max_size_bytes} bytes"
            )

        key = f"{BLOB_KEY_PREFIX}/{uuid.uuid4().hex[:12]}-{safe_file_name(pathname)}"

        try:
            post = self._s3.generate_presigned_post(
                Bucket=self.bucket,
                Key=key,
                Fields={"Content-Type": content_type},
                Conditions=[
                    {"Content-Type": content_type},
                    ["content-length-range", 1, self.max_size_bytes],
                ],
                ExpiresIn=PRESIGNED_URL_EXPIRES_SECONDS,
            )
            blob_url = self.presigned_download_url(key)
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(f"Presign error: {e}") from e

        logger.info(f"[Blob] Issued upload token for {key} ({content_type})")
        return {
            "url": post["url"],
            "fields": post["fields"],
            "key": key,
            "blobUrl": blob_url,
        }

    def presigned_download_url(self, key: str) -> str:
        return self._s3.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=PRESIGNED_URL_EXPIRES_SECONDS,
        )

    def confirm_upload(self, key: str) -> int:
        """
        Check that an uploaded object exists and return its size.

        Raises:
            BlobStorageError: If the object cannot be found
        """
        try:
            head = self._s3.head_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(f"Upload not found in bucket: {key}") from e

        size = int(head.get("ContentLength", 0))
        logger.info(f"[Blob] Upload completed: {key} ({size} bytes)")
        return size

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download_to_path(self, blob_url: str, destination: str) -> int:
        """
        Stream a blob to ``destination``.

        A freshly uploaded object can briefly answer 403/404 while it
        propagates, so those statuses, 5xx and connection errors are
        retried with exponential backoff.

        Returns:
            Number of bytes written

        Raises:
            BlobStorageError: If the blob cannot be downloaded
        """
        download = retry_with_backoff(
            max_attempts=self.download_attempts,
            base_delay=self.download_base_delay,
            exceptions=(TransientAPIError, requests.ConnectionError, requests.Timeout),
        )(self._download_once)

        try:
            written = download(blob_url, destination)
        except (TransientAPIError, requests.RequestException) as e:
            logger.error(f"[Blob] Error downloading file from blob storage: {e}")
            raise BlobStorageError("Failed to download file from blob storage") from e

        logger.info(f"[Blob] Download successful: {written} bytes -> {destination}")
        return written

    def _download_once(self, blob_url: str, destination: str) -> int:
        with self._http.get(blob_url, stream=True, timeout=BLOB_DOWNLOAD_TIMEOUT) as response:
            if response.status_code in (403, 404) or response.status_code >= 500:
                raise TransientAPIError(
                    f"Blob not available yet (HTTP {response.status_code})"
                )
            if not response.ok:
                raise BlobStorageError(
                    f"Failed to download file from blob storage (HTTP {response.status_code})"
                )

            written = 0
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=1024 * 1024):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
            return written
