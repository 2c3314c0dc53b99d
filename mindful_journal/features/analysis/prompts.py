"""
LLM prompt and output schema for journal entry analysis.
Kept in one place so the prompt and the schema it promises stay in sync.
"""

from typing import Any, Dict

from mindful_journal.features.journal.models import MAX_TAGS, Sentiment

ANALYSIS_TOOL_NAME = "record_entry_analysis"


def build_entry_analysis_prompt(text: str) -> str:
    """Build the instruction sent along with the entry text."""
    return f"""Analyze the following journal entry.
Provide a sentiment classification, a sentiment score (-1 negative to 1 positive),
extract up to {MAX_TAGS} relevant tags, write a very brief 1-sentence summary,
provide a short piece of constructive advice or a stoic quote based on the content,
and select a single emoji that best represents the mood.

Record the result with the {ANALYSIS_TOOL_NAME} tool.

Journal Entry: "{text}"
"""


def entry_analysis_tool() -> Dict[str, Any]:
    """Tool definition whose input schema is the structured analysis."""
    return {
        "name": ANALYSIS_TOOL_NAME,
        "description": "Record the sentiment analysis of a journal entry.",
        "input_schema": {
            "type": "object",
            "properties": {
                "sentiment": {
                    "type": "string",
                    "enum": [s.value for s in Sentiment],
                },
                "sentimentScore": {
                    "type": "number",
                    "minimum": -1,
                    "maximum": 1,
                    "description": "A number between -1 and 1",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "maxItems": MAX_TAGS,
                },
                "summary": {"type": "string"},
                "advice": {"type": "string"},
                "moodEmoji": {"type": "string"},
            },
            "required": ["sentiment", "sentimentScore", "tags", "summary", "advice", "moodEmoji"],
        },
    }
