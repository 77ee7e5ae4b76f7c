"""
Media-analysis client backed by the Gemini API.

Uploads videos to the Files API, waits for the remote file to become
ACTIVE, asks the multimodal model for a structured description and turns
the answer into typed results.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..constants import (
    GEMINI_MODEL,
    UPLOAD_POLL_INTERVAL_SECONDS,
    UPLOAD_POLL_BACKOFF_FACTOR,
    UPLOAD_POLL_MAX_INTERVAL_SECONDS,
    UPLOAD_POLL_MAX_ATTEMPTS,
    UPLOAD_POLL_MAX_WAIT_SECONDS,
    FILE_STATUS_MAX_RETRY_ATTEMPTS,
    FILE_STATUS_BASE_DELAY,
    RemoteFileState,
)
from ..models.analysis import ImageAnalysisResult, RemoteFileHandle, VideoAnalysisResult
from ..prompts import IMAGE_ANALYSIS_PROMPT, VIDEO_ANALYSIS_PROMPT
from ..utils.api_helpers import (
    ActivationTimeoutError,
    MediaAnalysisError,
    RateLimitError,
    TransientAPIError,
    retry_with_backoff_async,
)
from ..utils.json_recovery import parse_image_analysis, parse_video_analysis

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def _map_provider_error(error: Exception) -> Exception:
    """Classify a google-genai error as transient (retryable) or leave it as is."""
    if isinstance(error, genai_errors.ServerError):
        return TransientAPIError(f"Gemini server error: {error}")
    if isinstance(error, genai_errors.ClientError) and getattr(error, "code", None) == 429:
        return RateLimitError(f"Gemini rate limit: {error}")
    return error


class MediaAnalysisClient:
    """
    Client for the multimodal media-understanding model.

    Constructed once per process and shared by request handlers. The
    underlying ``genai.Client`` holds the API key; nothing here mutates
    global state.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = GEMINI_MODEL,
        poll_interval: float = UPLOAD_POLL_INTERVAL_SECONDS,
        poll_backoff: float = UPLOAD_POLL_BACKOFF_FACTOR,
        poll_max_interval: float = UPLOAD_POLL_MAX_INTERVAL_SECONDS,
        poll_max_attempts: int = UPLOAD_POLL_MAX_ATTEMPTS,
        poll_max_wait: float = UPLOAD_POLL_MAX_WAIT_SECONDS,
        client: Optional[Any] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if client is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY not configured in environment variables")
            client = genai.Client(api_key=api_key)

        self._client = client
        self.model = model
        self.poll_interval = poll_interval
        self.poll_backoff = poll_backoff
        self.poll_max_interval = poll_max_interval
        self.poll_max_attempts = poll_max_attempts
        self.poll_max_wait = poll_max_wait
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Upload & activation
    # ------------------------------------------------------------------

    async def upload_file(self, file_path: str, mime_type: str) -> RemoteFileHandle:
        """Upload a local file to the Files API. Provider rejections propagate."""
        try:
            remote_file = await self._client.aio.files.upload(
                file=file_path,
                config={"mime_type": mime_type},
            )
        except Exception as e:
            raise MediaAnalysisError(f"Upload rejected by Gemini: {e}") from e

        handle = RemoteFileHandle.from_provider(remote_file)
        logger.info(
            f"[Gemini] Uploaded {Path(file_path).name} as {handle.name} "
            f"(state={handle.state.value}, size={handle.size_bytes})"
        )
        return handle

    @retry_with_backoff_async(
        max_attempts=FILE_STATUS_MAX_RETRY_ATTEMPTS,
        base_delay=FILE_STATUS_BASE_DELAY,
    )
    async def get_file(self, name: str) -> RemoteFileHandle:
        """Fetch the current state of a remote file; transient errors are retried."""
        try:
            remote_file = await self._client.aio.files.get(name=name)
        except genai_errors.APIError as e:
            raise _map_provider_error(e) from e
        return RemoteFileHandle.from_provider(remote_file)

    async def wait_until_active(self, handle: RemoteFileHandle) -> RemoteFileHandle:
        """
        Poll the Files API until ``handle`` is ACTIVE.

        The delay between checks starts at ``poll_interval`` and grows by
        ``poll_backoff`` up to ``poll_max_interval``. A handle already ACTIVE
        is returned without polling; a handle that becomes ACTIVE on check k
        costs exactly k checks.

        Raises:
            MediaAnalysisError: If the upload has no name or processing failed
            ActivationTimeoutError: If the file is not ACTIVE after
                ``poll_max_attempts`` checks or ``poll_max_wait`` seconds
        """
        if handle.is_active:
            return handle
        if not handle.name:
            raise MediaAnalysisError("File upload did not return a file name")

        attempts = 0
        waited = 0.0
        delay = self.poll_interval
        current = handle

        while not current.is_active:
            if current.state == RemoteFileState.FAILED:
                raise MediaAnalysisError(f"Gemini failed to process file {handle.name}")
            if attempts >= self.poll_max_attempts or waited >= self.poll_max_wait:
                raise ActivationTimeoutError(
                    f"File did not become ACTIVE after {attempts} attempts "
                    f"and {waited:.0f}s (last state: {current.state.value})"
                )

            # Last sleep is trimmed so the total never exceeds poll_max_wait
            step = min(delay, self.poll_max_wait - waited)
            await self._sleep(step)
            waited += step
            delay = min(delay * self.poll_backoff, self.poll_max_interval)

            current = await self.get_file(handle.name)
            attempts += 1
            logger.info(f"[Gemini] File state: {current.state.value}, attempt {attempts}")

        return current

    async def delete_file(self, handle: RemoteFileHandle) -> None:
        """Remove an uploaded file from the provider. Failures are only logged."""
        if not handle.name:
            return
        try:
            await self._client.aio.files.delete(name=handle.name)
            logger.info(f"[Gemini] Deleted remote file {handle.name}")
        except Exception as e:
            logger.warning(f"[Gemini] Could not delete remote file {handle.name}: {e}")

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def _generate(self, contents: List[Any]) -> str:
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=contents,
        )
        text = response.text or ""
        logger.debug(f"[Gemini] Raw response ({len(text)} chars): {text[:500]}")
        return text

    async def analyze_video(self, file_path: str, mime_type: str) -> VideoAnalysisResult:
        """Upload a local video, wait for it to be ACTIVE, then describe it."""
        handle = None
        try:
            handle = await self.upload_file(file_path, mime_type)
            active = await self.wait_until_active(handle)
            return await self.analyze_video_by_uri(active.uri or "", active.mime_type or mime_type)
        except MediaAnalysisError:
            raise
        except Exception as e:
            logger.error(f"[Gemini] Error analyzing video: {e}")
            raise MediaAnalysisError(f"Failed to analyze video: {e}") from e
        finally:
            if handle is not None:
                await self.delete_file(handle)

    async def analyze_video_by_uri(self, file_uri: str, mime_type: str) -> VideoAnalysisResult:
        """Describe a video already uploaded to the Files API."""
        logger.info(f"[Gemini] Analyzing video with URI: {file_uri}")
        try:
            text = await self._generate([
                types.Part.from_uri(file_uri=file_uri, mime_type=mime_type),
                VIDEO_ANALYSIS_PROMPT,
            ])
        except Exception as e:
            logger.error(f"[Gemini] Error analyzing video: {e}")
            raise MediaAnalysisError(f"Failed to analyze video: {e}") from e
        return parse_video_analysis(text)

    async def analyze_image(self, file_path: str, mime_type: str) -> ImageAnalysisResult:
        """Describe a local image, sent inline with the request."""
        try:
            data = await asyncio.to_thread(Path(file_path).read_bytes)
            text = await self._generate([
                types.Part.from_bytes(data=data, mime_type=mime_type),
                IMAGE_ANALYSIS_PROMPT,
            ])
        except Exception as e:
            logger.error(f"[Gemini] Error analyzing image: {e}")
            raise MediaAnalysisError(f"Failed to analyze image: {e}") from e
        return parse_image_analysis(text)

    async def analyze_image_by_uri(self, file_uri: str, mime_type: str) -> ImageAnalysisResult:
        """Describe an image already uploaded to the Files API."""
        logger.info(f"[Gemini] Analyzing image with URI: {file_uri}")
        try:
            text = await self._generate([
                types.Part.from_uri(file_uri=file_uri, mime_type=mime_type),
                IMAGE_ANALYSIS_PROMPT,
            ])
        except Exception as e:
            logger.error(f"[Gemini] Error analyzing image: {e}")
            raise MediaAnalysisError(f"Failed to analyze image: {e}") from e
        return parse_image_analysis(text)
