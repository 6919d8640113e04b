"""
Prompt management for LLM text understanding.

Provides versioned prompt templates for:
- Three-tier keyword extraction from a summary
- Content analysis of a reading item
- Relevance judgment of search results against a summary
"""

import json
from typing import Any, Dict, List, Optional

from reading_recommender.config import settings


# ============================================================================
# PROMPT VERSIONS
# ============================================================================

CURRENT_PROMPT_VERSION = "v1.1"


# ============================================================================
# SYSTEM PROMPTS
# ============================================================================

KEYWORDS_SYSTEM_PROMPT_V1_0 = """You are a precise keyword extractor for a reading recommendation service.

Return results ONLY through the extract_keywords function call."""

KEYWORDS_SYSTEM_PROMPT_V1_1 = """You are a precise keyword extractor for a reading recommendation service.

Your task is to extract search keywords from a text so related books, articles and videos can be found.

CRITICAL RULES:
1. **mainTopics**: 3-5 key subjects of the text. These carry the most weight.
2. **specificConcepts**: 4-6 technical or specific terms.
3. **relatedTerms**: 4-6 broader or related concepts.
4. Keep each term concise (1-3 words). No sentences, no punctuation.
5. Never repeat a term in more than one category.
6. Use the language of the text.

OUTPUT FORMAT:
- Return valid JSON via the extract_keywords function call
- If function calling is unavailable, answer with a single JSON object with the
  keys mainTopics, specificConcepts, relatedTerms (arrays of strings) and nothing else
"""

ANALYSIS_SYSTEM_PROMPT = """You are a specialized JSON generator that analyzes content for a personal reading list.

Always respond through the analyze_content function call. If function calling is
unavailable, respond with valid, parseable JSON only. No other text or explanations."""

RELEVANCE_SYSTEM_PROMPT = """You rank search results for a reading recommendation service.

Score each result from 0 (unrelated) to 10 (exactly on topic) against the original summary.
Return one score per result, in input order, through the judge_relevance function call."""


# ============================================================================
# USER PROMPT BUILDERS
# ============================================================================

def truncate_text(text: str, max_length: int) -> str:
    """Truncate text to max_length characters, marking the cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "\n\n[... text truncated ...]"


def build_keywords_user_prompt(text: str, max_text_length: Optional[int] = None) -> str:
    """
    Build user prompt for keyword extraction.

    Args:
        text: Summary/title/description to analyze
        max_text_length: Truncation limit (default: from settings)

    Returns:
        Formatted user prompt string
    """
    limit = max_text_length or settings.prompt_max_text_length
    body = truncate_text(text.strip(), limit)

    return f"""Analyze this text and extract keywords in these categories:
- Main topics (3-5 key subjects)
- Specific concepts (4-6 technical or specific terms)
- Related terms (4-6 broader or related concepts)

TEXT:
{body}

Keep each term or phrase concise (1-3 words max).
Return the result via the extract_keywords function call."""


def build_analysis_user_prompt(title: str, url: Optional[str] = None) -> str:
    """
    Build user prompt for content analysis.

    Args:
        title: Title of the reading item
        url: Optional URL of the item
    """
    content = f"Title: {title.strip()}"
    if url:
        content += f"\nURL: {url.strip()}"

    return f"""Analyze this content and provide:
1. description: 2-3 sentence description
2. summary: 1 sentence summary
3. keyPoints: 3-5 key points
4. difficulty: beginner | intermediate | advanced
5. timeToConsume: estimated time (e.g. '10 minutes')
6. tags: 3-5 relevant tags

Content to analyze:
{content}"""


def build_relevance_user_prompt(summary: str, results: List[Dict[str, Any]]) -> str:
    """
    Build user prompt for relevance judgment.

    Args:
        summary: Original summary the recommendations are for
        results: Search results as dicts with title, snippet, source
    """
    return f"""ORIGINAL SUMMARY:
{truncate_text(summary.strip(), settings.prompt_max_text_length)}

SEARCH RESULTS ({len(results)}):
{json.dumps(results, ensure_ascii=False, indent=2)}

Rank these search results by relevance (0-10).
Return exactly {len(results)} scores, in the same order, via the judge_relevance function call."""


# ============================================================================
# PROMPT RETRIEVAL
# ============================================================================

def get_keywords_system_prompt(version: str = CURRENT_PROMPT_VERSION) -> str:
    """
    Get keyword extraction system prompt by version.

    Raises:
        ValueError: If version not found
    """
    if version == "v1.1":
        return KEYWORDS_SYSTEM_PROMPT_V1_1
    elif version == "v1.0":
        return KEYWORDS_SYSTEM_PROMPT_V1_0
    else:
        raise ValueError(f"Unknown prompt version: {version}")


def build_keywords_prompt(
    text: str,
    prompt_version: Optional[str] = None
) -> tuple[str, str]:
    """
    Build complete keyword extraction prompt (system + user).

    Args:
        text: Text to extract keywords from
        prompt_version: Prompt version to use (default: from settings)

    Returns:
        (system_prompt, user_prompt) tuple
    """
    version = prompt_version or settings.prompt_version

    return get_keywords_system_prompt(version), build_keywords_user_prompt(text)
