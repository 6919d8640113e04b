"""
Provider adapter: QuerySpec -> concrete query text and request hints.

Google-style operator syntax (quoted phrases, OR, site:, filetype:) is
understood by Google Custom Search, Serper and Brave alike.
"""

from typing import Any, Dict, Iterable, Optional

from reading_recommender.config import settings
from reading_recommender.models.keywords import ContentCategory
from reading_recommender.models.queries import QuerySpec


def quote_term(term: str) -> str:
    """Quote a term as an exact phrase (embedded quotes are dropped)."""
    return '"' + term.replace('"', "").strip() + '"'


def or_group(terms: Iterable[str]) -> str:
    """("a" OR "b"); a single term still gets parentheses for uniformity."""
    return "(" + " OR ".join(quote_term(t) for t in terms) + ")"


def to_query_text(spec: QuerySpec) -> str:
    """
    Render a QuerySpec as a search query string.

    Example:
        >>> to_query_text(QuerySpec(category="video",
        ...     required_any_of=("transformers", "NLP"),
        ...     required_all_of=(("attention mechanism", "self-attention"),),
        ...     category_filter="site:youtube.com"))
        '("transformers" OR "NLP") ("attention mechanism" OR "self-attention") site:youtube.com'
    """
    parts = [or_group(spec.required_any_of)]
    parts.extend(or_group(group) for group in spec.required_all_of if group)
    if spec.category_filter:
        parts.append(spec.category_filter)
    return " ".join(parts)


def to_filters(spec: QuerySpec, num_results: Optional[int] = None) -> Dict[str, Any]:
    """
    Provider-neutral request hints for a QuerySpec.

    Keys:
        num: Maximum number of results to request
        video_syndicated: Only syndicated (embeddable) videos, video category only
    """
    filters: Dict[str, Any] = {
        "num": num_results or settings.search_results_per_category,
    }
    if spec.category == ContentCategory.VIDEO:
        filters["video_syndicated"] = True
    return filters
