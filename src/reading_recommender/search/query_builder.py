"""
Query construction: KeywordSet + category -> provider-agnostic QuerySpec.

Pure functions only, no network access. Provider operators (quotes, OR,
site:) are applied later by the query adapter.
"""

from typing import Dict

import structlog

from reading_recommender.errors import InvalidInputError
from reading_recommender.models.keywords import ContentCategory, KeywordSet
from reading_recommender.models.queries import QuerySpec


logger = structlog.get_logger(__name__)

# Number of specific concepts combined into the AND-group
SPECIFIC_CONCEPTS_IN_QUERY = 2

VIDEO_EXCLUSION = "-site:youtube.com"

# Category refinements: refinement words, site filters, exclusions
CATEGORY_REFINEMENTS: Dict[ContentCategory, str] = {
    ContentCategory.VIDEO: "site:youtube.com",
    ContentCategory.BOOK: f"(book OR novel OR publication) {VIDEO_EXCLUSION}",
    ContentCategory.ARTICLE: f"(article OR research OR paper OR analysis) {VIDEO_EXCLUSION}",
    ContentCategory.WEBSITE: f"(guide OR resource OR tutorial) {VIDEO_EXCLUSION}",
    ContentCategory.REPORT: f"(report OR whitepaper OR study) filetype:pdf {VIDEO_EXCLUSION}",
    ContentCategory.ACADEMIC: (
        "(research OR paper OR study) "
        "(site:scholar.google.com OR site:arxiv.org OR site:researchgate.net)"
    ),
}


def get_category_filter(category: ContentCategory) -> str:
    """Textual refinement for a category."""
    return CATEGORY_REFINEMENTS[ContentCategory(category)]


class QueryBuilder:
    """
    Builds one QuerySpec per (keywords, category) pair.

    - required_any_of: main topics (OR-group)
    - required_all_of: one group of the first two specific concepts,
      omitted when there are none
    - category_filter: see CATEGORY_REFINEMENTS
    """

    def build(self, keywords: KeywordSet, category: ContentCategory) -> QuerySpec:
        """
        Build the query for one category.

        Raises:
            InvalidInputError: If keywords have no main topics
        """
        if not keywords.main_topics:
            raise InvalidInputError(
                f"No main topics to build a {ContentCategory(category).value} query from"
            )

        concepts = keywords.specific_concepts[:SPECIFIC_CONCEPTS_IN_QUERY]
        required_all_of = (tuple(concepts),) if concepts else ()

        spec = QuerySpec(
            category=category,
            required_any_of=keywords.main_topics,
            required_all_of=required_all_of,
            category_filter=get_category_filter(category),
        )

        logger.debug(
            "query_built",
            category=spec.category.value,
            any_of_count=len(spec.required_any_of),
            all_of_groups=len(spec.required_all_of)
        )

        return spec


def build_query(keywords: KeywordSet, category: ContentCategory) -> QuerySpec:
    """Convenience wrapper around QueryBuilder().build()."""
    return QueryBuilder().build(keywords, category)
