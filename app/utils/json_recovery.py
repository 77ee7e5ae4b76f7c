"""
Best-effort recovery of structured results from model output.

Generative models asked for JSON do not always return JSON: the payload may
be wrapped in a markdown fence, mixed with prose, or written as headings and
bullet lists. The helpers here turn such text into fully populated result
objects and never raise.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from ..constants import (
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
from ..models.analysis import AdCopy, ImageAnalysisResult, VideoAnalysisResult

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json\n?", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\n?")
_FENCED_OBJECT_RE = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)
_BARE_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
_SCENE_LINE_RE = re.compile(r"(?:Scene|Segment)\s+\d+[:\s]+([^\n]+)", re.IGNORECASE)


# ============================================================================
# PRIMARY PATH
# ============================================================================

def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json / ```) and surrounding whitespace."""
    cleaned = _JSON_FENCE_RE.sub("", text or "")
    cleaned = _FENCE_RE.sub("", cleaned)
    return cleaned.strip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse model output as a strict JSON object, ignoring code fences.

    Raises:
        ValueError: If the text is not a JSON object
    """
    data = json.loads(strip_code_fences(text))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


# ============================================================================
# FALLBACK PATH
# ============================================================================

def _label_pattern(field: str) -> str:
    """
    Regex for a field label: ``visualElements`` also matches
    ``visual elements``, ``visual_elements`` and ``Visual-Elements``.
    """
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", field).split()
    return r"[\s_-]*".join(re.escape(word) for word in words)


def extract_section(text: str, field: str) -> Optional[str]:
    """
    Recover a scalar field from semi-structured text.

    Tries, in order:
    1. A JSON fragment: ``"field": "value"``
    2. A line: ``field: value``
    3. A heading block: ``## Field`` followed by text up to the next heading

    Returns:
        The stripped value, or None if no pattern matched
    """
    if not text:
        return None

    json_fragment = re.search(
        rf'"{re.escape(field)}"\s*:\s*"((?:[^"\\]|\\.)*)"', text, re.IGNORECASE
    )
    if json_fragment and json_fragment.group(1).strip():
        try:
            return json.loads(f'"{json_fragment.group(1)}"').strip()
        except json.JSONDecodeError:
            return json_fragment.group(1).strip()

    label = _label_pattern(field)
    patterns = [
        re.compile(rf"{label}\**:\s*([^\n]+)", re.IGNORECASE),
        re.compile(rf"##?\s*{label}[:\s]+([^#]+)", re.IGNORECASE),
    ]
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip().strip("*").strip()

    return None


def split_list_block(block: str) -> List[str]:
    """One entry per non-empty line, leading bullet or number markers removed."""
    items = []
    for line in block.splitlines():
        item = _LIST_MARKER_RE.sub("", line).strip()
        if item:
            items.append(item)
    return items


def extract_array_section(text: str, field: str) -> Optional[List[str]]:
    """
    Recover a list field from semi-structured text.

    Tries a JSON array literal after ``"field":`` first, then a bulleted or
    numbered list under a heading naming the field.

    Returns:
        The list of entries, or None if nothing could be recovered
    """
    if not text:
        return None

    array_match = re.search(
        rf'"{re.escape(field)}"\s*:\s*\[([\s\S]*?)\]', text, re.IGNORECASE
    )
    if array_match:
        try:
            values = json.loads(f"[{array_match.group(1)}]")
            items = [str(value).strip() for value in values if str(value).strip()]
            if items:
                return items
        except json.JSONDecodeError:
            logger.debug(f"[Recovery] Array literal for '{field}' is not valid JSON")

    # Only a heading or label line counts; "the visual elements are..." in prose does not
    list_match = re.search(
        rf"^[ \t]*(?:#{{1,6}}[ \t]*)?\**{_label_pattern(field)}"
        rf"(?:\**[ \t]*:\**|\**[ \t]*(?=\n))[ \t]*\n?"
        rf"([\s\S]*?)(?=\n\s*\n|\n[A-Za-z#]|\Z)",
        text,
        re.IGNORECASE | re.MULTILINE,
    )
    if list_match:
        items = split_list_block(list_match.group(1))
        if items:
            return items

    return None


def extract_scenes(text: str) -> List[str]:
    """Scene list from text: array literal, bullet list, ``Scene N:`` lines, or a preview."""
    scenes = extract_array_section(text, "scenes")
    if scenes:
        return scenes

    numbered = [match.strip() for match in _SCENE_LINE_RE.findall(text or "") if match.strip()]
    if numbered:
        return numbered

    preview = (text or "").strip()[:FALLBACK_SCENE_PREVIEW_LENGTH]
    if not preview:
        return [FALLBACK_SCENES_EMPTY]
    return [FALLBACK_SCENE_PREFIX + preview]


# ============================================================================
# COERCION
# ============================================================================

def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (list, tuple)):
        return "\n".join(str(v) for v in value if v is not None).strip() or None
    return str(value).strip() or None


def _as_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        value = [value]
    items = [str(v).strip() for v in value if v is not None and str(v).strip()]
    return items or None


def _raw_description(text: str) -> str:
    return (text or "").strip() or FALLBACK_DESCRIPTION


# ============================================================================
# RESULT BUILDERS
# ============================================================================

def parse_video_analysis(text: str) -> VideoAnalysisResult:
    """Build a VideoAnalysisResult from model output. Never raises."""
    try:
        data = parse_json_object(text)
    except ValueError:
        logger.warning("[Recovery] Failed to parse video analysis as JSON, extracting from plain text")
        return VideoAnalysisResult(
            transcript=extract_section(text, "transcript") or FALLBACK_TRANSCRIPT,
            description=extract_section(text, "description") or _raw_description(text),
            scenes=extract_scenes(text),
        )

    return VideoAnalysisResult(
        transcript=_as_text(data.get("transcript")) or FALLBACK_TRANSCRIPT,
        description=_as_text(data.get("description")) or FALLBACK_DESCRIPTION,
        scenes=_as_list(data.get("scenes")) or [FALLBACK_SCENES_EMPTY],
    )


def parse_image_analysis(text: str) -> ImageAnalysisResult:
    """Build an ImageAnalysisResult from model output. Never raises."""
    try:
        data = parse_json_object(text)
    except ValueError:
        logger.warning("[Recovery] Failed to parse image analysis as JSON, extracting from plain text")
        return ImageAnalysisResult(
            description=extract_section(text, "description") or _raw_description(text),
            ad_copy=extract_array_section(text, "adCopy") or [FALLBACK_IMAGE_AD_COPY],
            visual_elements=extract_array_section(text, "visualElements") or [FALLBACK_VISUAL_ELEMENTS],
        )

    return ImageAnalysisResult(
        description=_as_text(data.get("description")) or FALLBACK_DESCRIPTION,
        ad_copy=_as_list(data.get("adCopy")) or [FALLBACK_IMAGE_AD_COPY],
        visual_elements=_as_list(data.get("visualElements")) or [FALLBACK_VISUAL_ELEMENTS],
    )


def _ad_copy_from_dict(data: Dict[str, Any]) -> AdCopy:
    return AdCopy(
        headline=_as_text(data.get("headline")) or FALLBACK_HEADLINE,
        description=_as_text(data.get("description")) or FALLBACK_AD_DESCRIPTION,
    )


def parse_ad_copy(text: str) -> AdCopy:
    """
    Build an AdCopy from tool arguments or free text. Never raises.

    Order: whole text as JSON, fenced JSON object, first bare object,
    ``"headline": "..."`` fragments, static fallback pair.
    """
    try:
        return _ad_copy_from_dict(parse_json_object(text))
    except ValueError:
        pass

    for pattern in (_FENCED_OBJECT_RE, _BARE_OBJECT_RE):
        match = pattern.search(text or "")
        if not match:
            continue
        candidate = match.group(1) if pattern.groups else match.group(0)
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return _ad_copy_from_dict(data)

    logger.warning("[Recovery] Ad copy is not valid JSON, falling back to field extraction")
    return AdCopy(
        headline=extract_section(text, "headline") or FALLBACK_HEADLINE,
        description=extract_section(text, "description") or FALLBACK_AD_DESCRIPTION,
    )
