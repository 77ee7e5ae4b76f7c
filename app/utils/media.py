import logging
import os
import tempfile
import time
import uuid
from typing import Optional

from ..constants import MediaKind
from ..services.blob_storage import safe_file_name
from .api_helpers import UnsupportedMediaTypeError

logger = logging.getLogger(__name__)


def classify_media(mime_type: Optional[str]) -> MediaKind:
    """
    Map a MIME type to the media kind to analyze.

    Raises:
        UnsupportedMediaTypeError: If the type is missing or neither video/* nor image/*
    """
    kind = MediaKind.from_mime_type(mime_type)
    if kind is None:
        raise UnsupportedMediaTypeError("File must be a video or image")
    return kind


def build_temp_path(file_name: Optional[str], temp_dir: Optional[str] = None) -> str:
    """Unique temp file path: ``<epoch ms>-<random>-<sanitized name>``."""
    directory = temp_dir or tempfile.gettempdir()
    os.makedirs(directory, exist_ok=True)
    unique = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_file_name(file_name)}"
    return os.path.join(directory, unique)


def remove_temp_file(path: Optional[str]) -> None:
    """Delete a temp file; failures are logged and never raised."""
    if not path:
        return
    try:
        os.unlink(path)
        logger.info(f"Temp file cleaned up: {path}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Error cleaning up temp file {path}: {e}")
