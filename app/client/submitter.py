"""
Submission client: queues local files for analysis and tracks them in the
result cache, the way the web UI does.

Each file becomes a pending AnalysisItem as soon as it is queued, then moves
to processing while the server call is in flight and ends completed or
error. Files are analyzed concurrently; each one finishes independently.
"""
import asyncio
import logging
import mimetypes
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from app.constants import REQUEST_TIMEOUT_SECONDS, AnalysisStatus, MediaKind, UploadEventType
from app.models.analysis import AnalysisItem, parse_media_result

from .cache import ResultCache

logger = logging.getLogger(__name__)

OnUpdate = Callable[[AnalysisItem], None]

# Thread pool for blocking HTTP calls
executor = ThreadPoolExecutor(max_workers=4)


class SubmissionError(Exception):
    """The analysis server rejected a submission or could not be reached."""
    pass


def guess_mime_type(path: str) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Failed to analyze file (HTTP {response.status_code})"


class AnalysisSubmitter:
    """HTTP client for the analysis API that records every submission in a ResultCache."""

    def __init__(
        self,
        base_url: str,
        cache: ResultCache,
        api_key: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        use_blob_upload: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.use_blob_upload = use_blob_upload
        self.session = session or requests.Session()
        if api_key:
            self.session.headers["X-API-Key"] = api_key

    # ------------------------------------------------------------------
    # HTTP calls (blocking)
    # ------------------------------------------------------------------

    def _post_json(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(f"{self.base_url}{path}", json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise SubmissionError(f"Could not reach analysis server: {e}") from e
        if not response.ok:
            raise SubmissionError(_error_message(response))
        return response.json()

    def analyze_file(self, path: str, mime_type: str) -> Dict[str, Any]:
        """Send a file as a multipart upload and return the result payload."""
        file_name = os.path.basename(path)
        with open(path, "rb") as f:
            try:
                response = self.session.post(
                    f"{self.base_url}/api/analyze-video",
                    files={"file": (file_name, f, mime_type)},
                    data={"mimeType": mime_type, "fileName": file_name},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise SubmissionError(f"Could not reach analysis server: {e}") from e

        if not response.ok:
            raise SubmissionError(_error_message(response))
        return response.json()

    def upload_to_storage(self, path: str, mime_type: str) -> str:
        """
        Upload a file straight to object storage.

        Returns:
            The ``blobUrl`` the server can download the file from
        """
        file_name = os.path.basename(path)
        token = self._post_json("/api/upload", {
            "type": UploadEventType.GENERATE_CLIENT_TOKEN.value,
            "payload": {
                "pathname": file_name,
                "contentType": mime_type,
                "size": os.path.getsize(path),
            },
        })

        with open(path, "rb") as f:
            try:
                response = requests.post(
                    token["url"],
                    data=token["fields"],
                    files={"file": (file_name, f, mime_type)},
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise SubmissionError(f"Upload to storage failed: {e}") from e
        if not response.ok:
            raise SubmissionError(f"Upload to storage failed (HTTP {response.status_code})")

        self._post_json("/api/upload", {
            "type": UploadEventType.UPLOAD_COMPLETED.value,
            "payload": {"key": token["key"]},
        })
        logger.info(f"[Submit] Uploaded {file_name} to storage as {token['key']}")
        return token["blobUrl"]

    def analyze_blob(self, blob_url: str, mime_type: str, file_name: str) -> Dict[str, Any]:
        return self._post_json("/api/analyze-video", {
            "blobUrl": blob_url,
            "mimeType": mime_type,
            "fileName": file_name,
        })

    def _analyze(self, path: str, mime_type: str) -> Dict[str, Any]:
        if self.use_blob_upload:
            blob_url = self.upload_to_storage(path, mime_type)
            return self.analyze_blob(blob_url, mime_type, os.path.basename(path))
        return self.analyze_file(path, mime_type)

    # ------------------------------------------------------------------
    # Submission lifecycle
    # ------------------------------------------------------------------

    def create_item(self, path: str) -> Optional[AnalysisItem]:
        """Record a pending item for ``path``, or None if it is not a video or image."""
        kind = MediaKind.from_mime_type(guess_mime_type(path))
        if kind is None:
            logger.warning(f"[Submit] Skipping {path}: not a video or image")
            return None
        return self.cache.append(AnalysisItem(file_name=os.path.basename(path), type=kind))

    def _record(self, item: AnalysisItem, on_update: Optional[OnUpdate], **changes) -> AnalysisItem:
        try:
            updated = self.cache.update(item.id, **changes)
        except KeyError:
            # Deleted from the cache while in flight; keep going without persisting
            logger.warning(f"[Submit] {item.file_name} ({item.id}) is no longer cached, not saving its status")
            updated = item.transition(**changes)
        if on_update is not None:
            on_update(updated)
        return updated

    async def _run_one(self, item: AnalysisItem, path: str, on_update: Optional[OnUpdate]) -> AnalysisItem:
        loop = asyncio.get_running_loop()
        mime_type = guess_mime_type(path)

        item = self._record(item, on_update, status=AnalysisStatus.PROCESSING)
        try:
            payload = await loop.run_in_executor(executor, self._analyze, path, mime_type)
            result = parse_media_result(item.type, payload)
        except Exception as e:
            logger.error(f"[Submit] Error analyzing {item.file_name}: {e}")
            return self._record(item, on_update, status=AnalysisStatus.ERROR, error=str(e) or "Failed to analyze file")

        logger.info(f"[Submit] Analysis completed for {item.file_name}")
        return self._record(item, on_update, status=AnalysisStatus.COMPLETED, result=result)

    async def submit(self, paths: Sequence[str], on_update: Optional[OnUpdate] = None) -> List[AnalysisItem]:
        """
        Queue and analyze files concurrently.

        Unsupported files are skipped. Every accepted file ends as a
        completed or error item; failures of one file never affect another.

        Returns:
            Final items in submission order
        """
        queued = []
        for path in paths:
            item = self.create_item(path)
            if item is None:
                continue
            if on_update is not None:
                on_update(item)
            queued.append((item, path))

        tasks = [asyncio.create_task(self._run_one(item, path, on_update)) for item, path in queued]
        return list(await asyncio.gather(*tasks))
