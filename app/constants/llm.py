"""
LLM (Large Language Model) Configuration Constants.

Model names, temperature settings, and other LLM-specific parameters.
"""

# ============================================================================
# MODEL NAMES
# ============================================================================

GEMINI_MODEL = "gemini-2.5-flash"
"""Multimodal model used to describe videos and images."""

OPENAI_MODEL_COPY = "gpt-4o"
"""Model used to write the ad headline and description."""


# ============================================================================
# GENERATION SETTINGS
# ============================================================================

LLM_TEMP_AD_COPY = 0.7
"""Temperature for ad copy generation (creative task)."""

AD_COPY_MAX_TOKENS = 1024
"""Maximum output tokens for ad copy generation."""

AD_COPY_TOOL_NAME = "ad_copy"
"""Name of the function tool the copy model is asked to call."""


# ============================================================================
# FALLBACK VALUES
# ============================================================================
# Used when a model response cannot be parsed into the expected shape.

FALLBACK_TRANSCRIPT = "No transcript available"
FALLBACK_DESCRIPTION = "No description available"
FALLBACK_SCENES_EMPTY = "No scenes identified"
FALLBACK_SCENE_PREFIX = "Main scene: "
FALLBACK_SCENE_PREVIEW_LENGTH = 200
FALLBACK_IMAGE_AD_COPY = "Professional marketing copy for your brand"
FALLBACK_VISUAL_ELEMENTS = "Key visual elements identified"

FALLBACK_HEADLINE = "Discover Something Amazing"
FALLBACK_AD_DESCRIPTION = "Check out this incredible ad that will capture your attention."
