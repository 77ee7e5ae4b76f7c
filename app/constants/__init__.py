"""
Application Constants Package.

This package centralizes all constants used throughout the application,
organized by domain/concern for better maintainability.

All constants are re-exported from this __init__.py for convenience.
You can import either from the main package or specific modules:

    from app.constants import MediaKind, UPLOAD_POLL_MAX_ATTEMPTS
    from app.constants.enums import MediaKind
    from app.constants.api import UPLOAD_POLL_MAX_ATTEMPTS
"""

# ============================================================================
# ENUMERATIONS
# ============================================================================

from .enums import (
    MediaKind,
    AnalysisStatus,
    RemoteFileState,
    UploadEventType,
)

# ============================================================================
# API & NETWORK
# ============================================================================

from .api import (
    REQUEST_TIMEOUT_SECONDS,
    BLOB_DOWNLOAD_TIMEOUT,
    PRESIGNED_URL_EXPIRES_SECONDS,
    UPLOAD_POLL_INTERVAL_SECONDS,
    UPLOAD_POLL_BACKOFF_FACTOR,
    UPLOAD_POLL_MAX_INTERVAL_SECONDS,
    UPLOAD_POLL_MAX_ATTEMPTS,
    UPLOAD_POLL_MAX_WAIT_SECONDS,
    BLOB_MAX_SIZE_BYTES,
    BLOB_ALLOWED_CONTENT_TYPES,
    BLOB_KEY_PREFIX,
    BLOB_DOWNLOAD_MAX_ATTEMPTS,
    BLOB_DOWNLOAD_BASE_DELAY,
    STORAGE_KEY,
)

# ============================================================================
# LLM
# ============================================================================

from .llm import (
    GEMINI_MODEL,
    OPENAI_MODEL_COPY,
    LLM_TEMP_AD_COPY,
    AD_COPY_MAX_TOKENS,
    AD_COPY_TOOL_NAME,
    FALLBACK_TRANSCRIPT,
    FALLBACK_DESCRIPTION,
    FALLBACK_SCENES_EMPTY,
    FALLBACK_SCENE_PREFIX,
    FALLBACK_SCENE_PREVIEW_LENGTH,
    FALLBACK_IMAGE_AD_COPY,
    FALLBACK_VISUAL_ELEMENTS,
    FALLBACK_HEADLINE,
    FALLBACK_AD_DESCRIPTION,
)

# ============================================================================
# RETRY
# ============================================================================

from .retry import (
    DEFAULT_RETRY_MAX_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_BACKOFF_FACTOR,
    DEFAULT_RETRY_MAX_DELAY,
    FILE_STATUS_MAX_RETRY_ATTEMPTS,
    FILE_STATUS_BASE_DELAY,
)


__all__ = [
    # Enums
    "MediaKind",
    "AnalysisStatus",
    "RemoteFileState",
    "UploadEventType",

    # API & Network
    "REQUEST_TIMEOUT_SECONDS",
    "BLOB_DOWNLOAD_TIMEOUT",
    "PRESIGNED_URL_EXPIRES_SECONDS",
    "UPLOAD_POLL_INTERVAL_SECONDS",
    "UPLOAD_POLL_BACKOFF_FACTOR",
    "UPLOAD_POLL_MAX_INTERVAL_SECONDS",
    "UPLOAD_POLL_MAX_ATTEMPTS",
    "UPLOAD_POLL_MAX_WAIT_SECONDS",
    "BLOB_MAX_SIZE_BYTES",
    "BLOB_ALLOWED_CONTENT_TYPES",
    "BLOB_KEY_PREFIX",
    "BLOB_DOWNLOAD_MAX_ATTEMPTS",
    "BLOB_DOWNLOAD_BASE_DELAY",
    "STORAGE_KEY",

    # LLM
    "GEMINI_MODEL",
    "OPENAI_MODEL_COPY",
    "LLM_TEMP_AD_COPY",
    "AD_COPY_MAX_TOKENS",
    "AD_COPY_TOOL_NAME",
    "FALLBACK_TRANSCRIPT",
    "FALLBACK_DESCRIPTION",
    "FALLBACK_SCENES_EMPTY",
    "FALLBACK_SCENE_PREFIX",
    "FALLBACK_SCENE_PREVIEW_LENGTH",
    "FALLBACK_IMAGE_AD_COPY",
    "FALLBACK_VISUAL_ELEMENTS",
    "FALLBACK_HEADLINE",
    "FALLBACK_AD_DESCRIPTION",

    # Retry
    "DEFAULT_RETRY_MAX_ATTEMPTS",
    "DEFAULT_RETRY_BASE_DELAY",
    "DEFAULT_RETRY_BACKOFF_FACTOR",
    "DEFAULT_RETRY_MAX_DELAY",
    "FILE_STATUS_MAX_RETRY_ATTEMPTS",
    "FILE_STATUS_BASE_DELAY",
]
