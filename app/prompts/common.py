"""
Common prompt components and instructions.

Reusable prompt snippets that can be composed into full prompts.
"""

# ============================================================================
# JSON OUTPUT INSTRUCTIONS
# ============================================================================

JSON_OUTPUT_RELAXED = """
**OUTPUT FORMAT**
Return valid JSON matching the schema.
If uncertain about a field, use an empty value of the correct type.
"""

# ============================================================================
# JSON SCHEMAS (Common Structures)
# ============================================================================

SCHEMA_AD_COPY = {
    "type": "object",
    "properties": {
        "headline": {
            "type": "string",
            "description": "A headline (maximum 50 characters) - should be attention-grabbing and concise"
        },
        "description": {
            "type": "string",
            "description": "A longer ad description - should be persuasive and based on the Problem-Solution Framework"
        }
    },
    "required": ["headline", "description"]
}
