"""
Ad copy generation with the OpenAI chat completions API.

Turns a media description (plus transcript and scenes for videos) into a
headline and primary text. The model is asked to call the ``ad_copy``
function tool; free-text answers go through the JSON recovery helpers and
end with a static fallback pair, so a bad answer never becomes an error.
"""
import logging
from typing import Any, List, Optional

from openai import AsyncOpenAI

from ..constants import (
    AD_COPY_MAX_TOKENS,
    AD_COPY_TOOL_NAME,
    LLM_TEMP_AD_COPY,
    OPENAI_MODEL_COPY,
)
from ..models.analysis import AdCopy
from ..prompts import AD_COPY_SYSTEM_PROMPT, AD_COPY_TOOL, build_ad_copy_prompt
from ..utils.api_helpers import CopyGenerationError
from ..utils.json_recovery import parse_ad_copy

logger = logging.getLogger(__name__)


def build_copy_content(
    description: str,
    transcript: Optional[str] = None,
    scenes: Optional[List[str]] = None,
) -> str:
    """Assemble the ad content block sent to the copy model."""
    parts = [description.strip()]
    if transcript:
        parts.append(f"Transcript:\n{transcript.strip()}")
    if scenes:
        parts.append("Scenes:\n" + "\n".join(scenes))
    return "\n\n".join(parts)


class CopyGenerationClient:
    """Client for the text-generation model that writes ad copy."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = OPENAI_MODEL_COPY,
        temperature: float = LLM_TEMP_AD_COPY,
        max_tokens: int = AD_COPY_MAX_TOKENS,
        client: Optional[Any] = None,
    ):
        if client is None:
            if not api_key:
                raise ValueError("OPENAI_API_KEY not configured in environment variables")
            client = AsyncOpenAI(api_key=api_key)

        self._client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_ad_copy(
        self,
        description: str,
        transcript: Optional[str] = None,
        scenes: Optional[List[str]] = None,
    ) -> AdCopy:
        """
        Generate a headline and description for an analyzed ad.

        Args:
            description: Description of the ad from the media analysis
            transcript: Optional transcript (videos)
            scenes: Optional scene breakdown (videos)

        Returns:
            AdCopy, possibly the static fallback pair if the answer was unusable

        Raises:
            CopyGenerationError: If the provider call itself fails or returns nothing
        """
        content = build_copy_content(description, transcript, scenes)
        logger.info(f"[Copy] Generating ad copy ({len(content)} chars of content)")

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": AD_COPY_SYSTEM_PROMPT},
                    {"role": "user", "content": build_ad_copy_prompt(content)},
                ],
                tools=[AD_COPY_TOOL],
                tool_choice={"type": "function", "function": {"name": AD_COPY_TOOL_NAME}},
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"[Copy] Error generating ad copy: {e}")
            raise CopyGenerationError(f"Failed to generate ad copy: {e}") from e

        if not response.choices:
            raise CopyGenerationError("Copy model returned an empty response")
        message = response.choices[0].message

        for tool_call in message.tool_calls or []:
            if tool_call.function.name == AD_COPY_TOOL_NAME:
                ad_copy = parse_ad_copy(tool_call.function.arguments or "")
                logger.info(f"[Copy] Ad copy from tool call: {ad_copy.headline!r}")
                return ad_copy

        if message.content:
            ad_copy = parse_ad_copy(message.content)
            logger.info(f"[Copy] Ad copy from text response: {ad_copy.headline!r}")
            return ad_copy

        raise CopyGenerationError("Copy model returned neither a tool call nor text")
