"""
Prompts Package.

Centralized location for reusable prompt components and instructions.
Each service module imports the prompts it sends to its provider.
"""

from .common import (
    # JSON Instructions
    JSON_OUTPUT_RELAXED,

    # Schemas
    SCHEMA_AD_COPY,
)
from .media import (
    VIDEO_ANALYSIS_PROMPT,
    IMAGE_ANALYSIS_PROMPT,
)
from .copywriting import (
    AD_COPY_SYSTEM_PROMPT,
    AD_COPY_TEMPLATE,
    AD_COPY_TOOL,
    build_ad_copy_prompt,
)

__all__ = [
    "JSON_OUTPUT_RELAXED",
    "SCHEMA_AD_COPY",
    "VIDEO_ANALYSIS_PROMPT",
    "IMAGE_ANALYSIS_PROMPT",
    "AD_COPY_SYSTEM_PROMPT",
    "AD_COPY_TEMPLATE",
    "AD_COPY_TOOL",
    "build_ad_copy_prompt",
]
