from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache

from .constants import (
    GEMINI_MODEL,
    OPENAI_MODEL_COPY,
    LLM_TEMP_AD_COPY,
    AD_COPY_MAX_TOKENS,
    UPLOAD_POLL_INTERVAL_SECONDS,
    UPLOAD_POLL_BACKOFF_FACTOR,
    UPLOAD_POLL_MAX_INTERVAL_SECONDS,
    UPLOAD_POLL_MAX_ATTEMPTS,
    UPLOAD_POLL_MAX_WAIT_SECONDS,
    BLOB_MAX_SIZE_BYTES,
    BLOB_DOWNLOAD_MAX_ATTEMPTS,
    REQUEST_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = "development"

    # Gemini (media understanding)
    gemini_api_key: Optional[str] = None
    gemini_model: str = GEMINI_MODEL

    # OpenAI (ad copy generation)
    openai_api_key: Optional[str] = None
    openai_model: str = OPENAI_MODEL_COPY
    copy_temperature: float = LLM_TEMP_AD_COPY
    copy_max_tokens: int = AD_COPY_MAX_TOKENS

    # Remote file activation polling
    upload_poll_interval: float = Field(
        default=UPLOAD_POLL_INTERVAL_SECONDS,
        description="Initial delay (seconds) between file status checks"
    )
    upload_poll_backoff: float = Field(
        default=UPLOAD_POLL_BACKOFF_FACTOR,
        description="Multiplier applied to the poll delay after each check"
    )
    upload_poll_max_interval: float = Field(
        default=UPLOAD_POLL_MAX_INTERVAL_SECONDS,
        description="Upper bound (seconds) for the poll delay"
    )
    upload_poll_max_attempts: int = Field(
        default=UPLOAD_POLL_MAX_ATTEMPTS,
        description="Maximum status checks before the upload is considered timed out"
    )
    upload_poll_max_wait: float = Field(
        default=UPLOAD_POLL_MAX_WAIT_SECONDS,
        description="Total seconds spent waiting for a file to become ACTIVE"
    )

    # Object storage
    blob_bucket: Optional[str] = None
    aws_region: str = "us-east-1"
    blob_max_size_bytes: int = BLOB_MAX_SIZE_BYTES
    blob_download_attempts: int = BLOB_DOWNLOAD_MAX_ATTEMPTS

    # Local files
    temp_dir: Optional[str] = Field(
        default=None,
        description="Directory for temporary media files (system temp dir if unset)"
    )

    # API Security
    allowed_api_keys: str = ""
    expose_provider_key: bool = Field(
        default=False,
        description="Serve GEMINI_API_KEY on /api/gemini-config for direct client uploads"
    )

    # Client
    api_base_url: str = "http://localhost:8000"
    request_timeout_seconds: int = REQUEST_TIMEOUT_SECONDS
    cache_path: str = Field(
        default=".ad-media-analyzer/local-storage.json",
        description="File backing the client-side result cache"
    )

    @property
    def api_keys_set(self) -> set[str]:
        return {k.strip() for k in self.allowed_api_keys.split(",") if k.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
