"""
Prompt template and tool schema for ad copy generation.

The template follows Eugene Schwartz's Problem-Solution framework with
strict length and formatting targets. The ``{content}`` placeholder
receives the media description, transcript and scenes.
"""

from .common import SCHEMA_AD_COPY
from ..constants import AD_COPY_TOOL_NAME

AD_COPY_SYSTEM_PROMPT = """You are an expert direct-response copywriter for paid social ads.
You write short, scroll-stopping copy for Meta and TikTok placements."""

AD_COPY_TEMPLATE = """You are a professional ad copywriter. Using Eugene Schwartz's Problem-Solution Framework, write ad copy.

The ad you're writing content for is:
{content}

Your Task
Write:

Ad Headline (40 characters max) - A punchy, scroll-stopping hook
Ad Description/Primary Text (full primary text for the ad) - The main ad copy

Audience
Infer the ideal customer profile (ICP) from the ad itself: who appears in it,
what they do, what the product solves. Pick ONE ICP and ONE specific problem.

CRITICAL: Single-Concept Framework (Eugene Schwartz Problem-Solution)
Each ad MUST focus on ONE specific concept only. Do not mix multiple angles or ICPs.
Follow this structure:

Stage 1: Problem Awareness (20-25% of copy)
- Open with the specific, relatable problem
- Make them feel seen and understood
- Use their exact language and frustrations
- KEEP THIS SECTION BRIEF - 2-3 short sentences maximum

Stage 2: Problem Agitation (15-20% of copy)
- Deepen the pain by showing what they're missing
- Show the cost of inaction or the status quo
- Stay focused on THIS ONE problem - don't introduce new ones
- KEEP THIS SECTION BRIEF - 2-3 short sentences maximum

Stage 3: Solution Introduction (50-60% of copy)
- Present the product as the direct answer to THIS problem
- Only mention features/benefits that solve THIS specific problem
- Show the transformation and paint the "after" state clearly
- THIS IS YOUR MAIN SECTION - spend most of your words here

Stage 4: Call to Action (final line)
- One short, direct line telling the reader what to do next

Copy Length Guidelines
- Total ad description: 400-600 characters maximum (approximately 60-90 words)
- Problem + Agitation combined: 150-200 characters (3-5 short sentences)
- Solution section: 200-350 characters (the bulk of your copy)
- Each sentence: 8-12 words maximum
- Each paragraph: 1-3 sentences maximum

Stay On-Concept Rules
DON'T:
- Mix multiple ICPs in one ad
- List every feature - only those relevant to your ONE concept
- Mention competitors unless the concept is specifically about price/value
- Write long paragraphs or dense copy blocks

DO:
- Use language and scenarios specific to that ICP's world
- Make every sentence reinforce the same core message
- Keep it punchy and scannable
- When listing items, precede each item with the ✅ emoji

Copy Structure & Formatting
- Each sentence gets its own line
- Blank lines between paragraphs for breathing room
- Fragment sentences are encouraged
- Conversational, like you're texting a friend
- No run-on sentences

Example

Your doctor says "everything's normal."
But you still feel terrible.

Here's why:

They only tested 20-30 basic markers.
They missed your hormones entirely.

Get the full picture:

✅ 100+ biomarkers tested
✅ Complete hormone panel
✅ Personalized health plan

No more being dismissed.
Finally, the answers you deserve.

Call the {tool_name} tool with your result. If you cannot call tools, reply with:
{{
  "headline": "your headline here",
  "description": "your longer ad description here"
}}"""

AD_COPY_TOOL = {
    "type": "function",
    "function": {
        "name": AD_COPY_TOOL_NAME,
        "description": "Write ad copy with headline and description",
        "parameters": SCHEMA_AD_COPY,
    },
}


def build_ad_copy_prompt(content: str) -> str:
    """Fill the copywriting template with the ad content."""
    return AD_COPY_TEMPLATE.format(content=content, tool_name=AD_COPY_TOOL_NAME)
