"""
Retry and Backoff Configuration Constants.

Settings for retry logic, exponential backoff, and error recovery.
"""

# ============================================================================
# DEFAULT RETRY SETTINGS
# ============================================================================

DEFAULT_RETRY_MAX_ATTEMPTS = 3
"""Default maximum number of retry attempts."""

DEFAULT_RETRY_BASE_DELAY = 1.0
"""Default base delay between retries (seconds)."""

DEFAULT_RETRY_BACKOFF_FACTOR = 2.0
"""Default exponential backoff multiplier."""

DEFAULT_RETRY_MAX_DELAY = 60.0
"""Default maximum delay between retries (seconds)."""


# ============================================================================
# SERVICE-SPECIFIC RETRY CONFIGURATION
# ============================================================================

FILE_STATUS_MAX_RETRY_ATTEMPTS = 3
"""Maximum attempts for a single file status check on transient errors."""

FILE_STATUS_BASE_DELAY = 1.0
"""Base delay for file status check retries (seconds)."""
