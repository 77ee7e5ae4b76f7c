"""
Provider clients shared by request handlers.

Each client is built once per process from the settings. Handlers receive
them through FastAPI ``Depends`` so tests can swap in fakes with
``app.dependency_overrides``.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import HTTPException

from app.config import get_settings
from app.services.blob_storage import BlobStorage
from app.services.copywriter import CopyGenerationClient
from app.services.gemini import MediaAnalysisClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _build_media_client() -> MediaAnalysisClient:
    settings = get_settings()
    return MediaAnalysisClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        poll_interval=settings.upload_poll_interval,
        poll_backoff=settings.upload_poll_backoff,
        poll_max_interval=settings.upload_poll_max_interval,
        poll_max_attempts=settings.upload_poll_max_attempts,
        poll_max_wait=settings.upload_poll_max_wait,
    )


@lru_cache(maxsize=1)
def _build_copy_client() -> CopyGenerationClient:
    settings = get_settings()
    return CopyGenerationClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.copy_temperature,
        max_tokens=settings.copy_max_tokens,
    )


@lru_cache(maxsize=1)
def _build_blob_storage() -> BlobStorage:
    settings = get_settings()
    return BlobStorage(
        bucket=settings.blob_bucket,
        region=settings.aws_region,
        max_size_bytes=settings.blob_max_size_bytes,
        download_attempts=settings.blob_download_attempts,
    )


def get_media_client() -> MediaAnalysisClient:
    try:
        return _build_media_client()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_copy_client() -> Optional[CopyGenerationClient]:
    # None disables enrichment.
    try:
        return _build_copy_client()
    except ValueError as e:
        logger.warning(f"[Copy] Ad copy generation disabled: {e}")
        return None


def get_blob_storage() -> BlobStorage:
    try:
        return _build_blob_storage()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_optional_blob_storage() -> Optional[BlobStorage]:
    try:
        return _build_blob_storage()
    except ValueError:
        return None
