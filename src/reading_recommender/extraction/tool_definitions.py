"""
Tool definitions for LLM function calling.

Defines the function calling schemas the LLM uses to return structured
results for:
- keyword extraction (three importance tiers)
- content analysis of a reading item
- relevance judgment of search results

Based on OpenAI function calling format, compatible with:
- OpenAI API
- DeepSeek API
- Ollama (with tool calling support)
- OpenRouter
"""

from typing import Dict, Any, List


# ============================================================================
# SCHEMA VERSION
# ============================================================================

SCHEMA_VERSION = "keywords-schema-v1"

EXTRACT_KEYWORDS_TOOL = "extract_keywords"
ANALYZE_CONTENT_TOOL = "analyze_content"
JUDGE_RELEVANCE_TOOL = "judge_relevance"


def _string_array(description: str, min_items: int = 0, max_items: int = 8) -> Dict[str, Any]:
    return {
        "type": "array",
        "description": description,
        "minItems": min_items,
        "maxItems": max_items,
        "items": {"type": "string", "maxLength": 60},
    }


# ============================================================================
# TOOL DEFINITIONS
# ============================================================================

def get_keyword_tool_definition() -> Dict[str, Any]:
    """
    Get the keyword extraction tool definition.

    Three tiers, each a short list of concise terms (1-3 words):
    - mainTopics: 3-5 key subjects (highest weight in relevance scoring)
    - specificConcepts: 4-6 technical or specific terms
    - relatedTerms: 4-6 broader or related concepts
    """
    return {
        "type": "function",
        "function": {
            "name": EXTRACT_KEYWORDS_TOOL,
            "description": "Extract weighted search keywords from a text, partitioned into three importance tiers.",
            "parameters": {
                "type": "object",
                "required": ["mainTopics", "specificConcepts", "relatedTerms"],
                "additionalProperties": False,
                "properties": {
                    "mainTopics": _string_array(
                        "3-5 key subjects of the text. Each term 1-3 words.",
                        min_items=1, max_items=5
                    ),
                    "specificConcepts": _string_array(
                        "4-6 technical or specific terms from the text. Each term 1-3 words.",
                        max_items=6
                    ),
                    "relatedTerms": _string_array(
                        "4-6 broader or related concepts. Each term 1-3 words.",
                        max_items=6
                    ),
                    "authors": _string_array(
                        "Optional: authors or experts mentioned in the text.",
                        max_items=5
                    ),
                },
            },
        },
    }


def get_analysis_tool_definition() -> Dict[str, Any]:
    """
    Get the content analysis tool definition for a single reading item.
    """
    return {
        "type": "function",
        "function": {
            "name": ANALYZE_CONTENT_TOOL,
            "description": "Describe and analyze a reading item (book, article, video or website).",
            "parameters": {
                "type": "object",
                "required": ["description", "summary", "keyPoints", "difficulty", "timeToConsume", "tags"],
                "additionalProperties": False,
                "properties": {
                    "description": {
                        "type": "string",
                        "description": "2-3 sentence description of the content"
                    },
                    "summary": {
                        "type": "string",
                        "description": "1 sentence summary"
                    },
                    "keyPoints": _string_array("3-5 key points", min_items=1, max_items=5),
                    "difficulty": {
                        "type": "string",
                        "enum": ["beginner", "intermediate", "advanced"],
                        "description": "Audience level required"
                    },
                    "timeToConsume": {
                        "type": "string",
                        "description": "Estimated time to read/watch, e.g. '10 minutes'"
                    },
                    "tags": _string_array("3-5 relevant tags", min_items=1, max_items=5),
                },
            },
        },
    }


def get_relevance_tool_definition(results_count: int) -> Dict[str, Any]:
    """
    Get the relevance judgment tool definition.

    Args:
        results_count: Number of search results being judged; the scores
            array must have exactly this many entries, in input order.
    """
    return {
        "type": "function",
        "function": {
            "name": JUDGE_RELEVANCE_TOOL,
            "description": "Score how relevant each search result is to the original summary.",
            "parameters": {
                "type": "object",
                "required": ["scores"],
                "additionalProperties": False,
                "properties": {
                    "scores": {
                        "type": "array",
                        "description": "One relevance score (0-10) per search result, in the same order as the input list.",
                        "minItems": results_count,
                        "maxItems": results_count,
                        "items": {"type": "number", "minimum": 0, "maximum": 10},
                    }
                },
            },
        },
    }


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_tool_name(tool_definition: Dict[str, Any]) -> str:
    """Name of the function declared by a tool definition."""
    return tool_definition["function"]["name"]


def format_tool_choice_for_provider(provider: str, tool_name: str) -> Any:
    """
    Format the tool_choice parameter for a specific LLM provider.

    Args:
        provider: Provider name ("openai", "ollama", "deepseek", "openrouter")
        tool_name: Function the model must call

    Returns:
        Provider-specific tool_choice value
    """
    if provider in ["openai", "deepseek", "openrouter"]:
        return {"type": "function", "function": {"name": tool_name}}

    elif provider == "ollama":
        # Ollama has no forced tool choice; the prompt instructs the model instead
        return "required"

    else:
        raise ValueError(f"Unknown provider: {provider}")
