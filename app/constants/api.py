"""
API and Network Configuration Constants.

Timeouts, polling budgets, upload limits and other network-related settings.
"""

# ============================================================================
# TIMEOUTS (in seconds)
# ============================================================================

REQUEST_TIMEOUT_SECONDS = 300
"""Overall ceiling for one analysis request (matches the hosting limit)."""

BLOB_DOWNLOAD_TIMEOUT = 60
"""Timeout for downloading an uploaded file from object storage."""

PRESIGNED_URL_EXPIRES_SECONDS = 3600
"""Lifetime of presigned upload and download URLs."""


# ============================================================================
# REMOTE FILE ACTIVATION POLLING
# ============================================================================

UPLOAD_POLL_INTERVAL_SECONDS = 5.0
"""Initial delay between two file status checks."""

UPLOAD_POLL_BACKOFF_FACTOR = 1.5
"""Multiplier applied to the poll delay after each check."""

UPLOAD_POLL_MAX_INTERVAL_SECONDS = 15.0
"""Upper bound for the poll delay."""

UPLOAD_POLL_MAX_ATTEMPTS = 30
"""Maximum number of status checks before giving up."""

UPLOAD_POLL_MAX_WAIT_SECONDS = 150.0
"""Total time spent waiting between checks; keeps activation well under REQUEST_TIMEOUT_SECONDS."""


# ============================================================================
# BLOB STORAGE
# ============================================================================

BLOB_MAX_SIZE_BYTES = 100 * 1024 * 1024
"""Maximum accepted upload size (100MB)."""

BLOB_ALLOWED_CONTENT_TYPES = (
    "video/mp4",
    "video/quicktime",
    "video/x-msvideo",
    "image/jpeg",
    "image/png",
    "image/webp",
)
"""Content types accepted for direct-to-storage uploads."""

BLOB_KEY_PREFIX = "uploads"
"""Object key prefix for uploaded media."""

BLOB_DOWNLOAD_MAX_ATTEMPTS = 4
"""Download attempts while the freshly uploaded object propagates."""

BLOB_DOWNLOAD_BASE_DELAY = 1.0
"""Initial delay between download attempts (seconds)."""


# ============================================================================
# CLIENT-SIDE CACHE
# ============================================================================

STORAGE_KEY = "saved-analysis-results"
"""Key under which the analysis list is persisted."""
