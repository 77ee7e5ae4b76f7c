"""
Request orchestration for media analysis.

Every analysis follows the same pipeline:
- Validate the MIME type (before any remote call)
- Acquire the media (uploaded temp file, downloaded blob, or provider URI)
- Describe it with the media-understanding model
- Enrich the result with generated ad copy (best-effort)
- Remove temporary files on every exit path
"""
import asyncio
import logging
from typing import Optional

import aiofiles

from app.constants import MediaKind
from app.models.analysis import MediaAnalysisResult, VideoAnalysisResult
from app.services.blob_storage import BlobStorage
from app.services.copywriter import CopyGenerationClient
from app.services.gemini import MediaAnalysisClient
from app.utils.media import build_temp_path, classify_media, remove_temp_file

logger = logging.getLogger(__name__)


async def analyze_media_file(
    kind: MediaKind,
    file_path: str,
    mime_type: str,
    media_client: MediaAnalysisClient,
) -> MediaAnalysisResult:
    """Describe a local media file with the route matching its kind."""
    if kind == MediaKind.VIDEO:
        return await media_client.analyze_video(file_path, mime_type)
    return await media_client.analyze_image(file_path, mime_type)


async def analyze_media_reference(
    kind: MediaKind,
    file_uri: str,
    mime_type: str,
    media_client: MediaAnalysisClient,
) -> MediaAnalysisResult:
    """Describe a file already held by the provider."""
    if kind == MediaKind.VIDEO:
        return await media_client.analyze_video_by_uri(file_uri, mime_type)
    return await media_client.analyze_image_by_uri(file_uri, mime_type)


async def enrich_with_ad_copy(
    result: MediaAnalysisResult,
    copy_client: Optional[CopyGenerationClient],
) -> MediaAnalysisResult:
    """
    Attach generated ad copy to a result.

    Best-effort: any failure is logged and the result is returned unchanged
    (no ``claudeAdCopy``), so enrichment never fails the request.
    """
    if copy_client is None:
        logger.info("[Workflow] Ad copy client not configured, skipping enrichment")
        return result

    try:
        if isinstance(result, VideoAnalysisResult):
            ad_copy = await copy_client.generate_ad_copy(
                result.description,
                transcript=result.transcript,
                scenes=result.scenes,
            )
        else:
            ad_copy = await copy_client.generate_ad_copy(result.description)
    except Exception as e:
        logger.error(f"[Workflow] Error generating ad copy: {e}")
        return result

    return result.model_copy(update={"generated_ad_copy": ad_copy})


async def process_upload(
    content: bytes,
    file_name: Optional[str],
    mime_type: Optional[str],
    media_client: MediaAnalysisClient,
    copy_client: Optional[CopyGenerationClient],
    temp_dir: Optional[str] = None,
) -> MediaAnalysisResult:
    """
    Analyze a file uploaded with the request.

    Raises:
        UnsupportedMediaTypeError: If the MIME type is not video/* or image/*
        MediaAnalysisError: If the media-understanding call fails
    """
    kind = classify_media(mime_type)
    temp_path = build_temp_path(file_name, temp_dir)

    try:
        async with aiofiles.open(temp_path, "wb") as f:
            await f.write(content)
        logger.info(f"[Workflow] File saved to temp path: {temp_path} ({len(content)} bytes)")

        result = await analyze_media_file(kind, temp_path, mime_type, media_client)
        return await enrich_with_ad_copy(result, copy_client)
    finally:
        remove_temp_file(temp_path)


async def process_blob(
    blob_url: str,
    file_name: Optional[str],
    mime_type: Optional[str],
    media_client: MediaAnalysisClient,
    copy_client: Optional[CopyGenerationClient],
    blob_storage: BlobStorage,
    temp_dir: Optional[str] = None,
) -> MediaAnalysisResult:
    """
    Download a previously uploaded blob and analyze it.

    Raises:
        UnsupportedMediaTypeError: If the MIME type is not video/* or image/*
        BlobStorageError: If the blob cannot be downloaded
        MediaAnalysisError: If the media-understanding call fails
    """
    kind = classify_media(mime_type)
    temp_path = build_temp_path(file_name, temp_dir)

    try:
        logger.info(f"[Workflow] Downloading file from blob storage: {blob_url}")
        await asyncio.to_thread(blob_storage.download_to_path, blob_url, temp_path)

        result = await analyze_media_file(kind, temp_path, mime_type, media_client)
        return await enrich_with_ad_copy(result, copy_client)
    finally:
        remove_temp_file(temp_path)


async def process_reference(
    file_uri: str,
    mime_type: Optional[str],
    media_client: MediaAnalysisClient,
    copy_client: Optional[CopyGenerationClient],
) -> MediaAnalysisResult:
    """Analyze a file already uploaded to the provider (no temp file)."""
    kind = classify_media(mime_type)
    result = await analyze_media_reference(kind, file_uri, mime_type, media_client)
    return await enrich_with_ad_copy(result, copy_client)
