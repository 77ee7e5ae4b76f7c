"""
Prompts for the multimodal media-understanding model.

Each prompt asks for a JSON object whose keys match the result models in
``app.models.analysis``; the parser in ``app.utils.json_recovery`` copes
with responses that ignore the requested shape.
"""

from .common import JSON_OUTPUT_RELAXED

VIDEO_ANALYSIS_PROMPT = f"""Please analyze this video and provide:

1. A complete transcript of all spoken dialogue and audio content in the video
2. A detailed description of the video including:
   - The overall setting and environment
   - Key visual elements and props
   - Lighting and atmosphere
   - Any notable actions or movements
3. A breakdown of distinct scenes or segments

Please format your response as JSON with the following structure:
{{
  "transcript": "Full transcript of the video...",
  "description": "Detailed description of the setting and visuals...",
  "scenes": ["Scene 1 description", "Scene 2 description", ...]
}}
{JSON_OUTPUT_RELAXED}"""

IMAGE_ANALYSIS_PROMPT = f"""Please analyze this image for advertising and marketing purposes. Provide:

1. A detailed description of the image including:
   - The overall setting and environment
   - Key visual elements, objects, and subjects
   - Colors, lighting, and mood
   - Composition and style

2. Ad copy on the ad (the text that is currently displayed on the ad image)

3. A list of key visual elements that make this image effective for marketing

Please format your response as JSON with the following structure:
{{
  "description": "Detailed description of the image...",
  "adCopy": ["Ad copy option 1", "Ad copy option 2", "Ad copy option 3"],
  "visualElements": ["Element 1", "Element 2", "Element 3"]
}}
{JSON_OUTPUT_RELAXED}"""
