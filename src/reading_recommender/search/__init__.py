"""
Search package: query construction and web search providers.

- query_builder: KeywordSet + category -> QuerySpec (pure)
- query_adapter: QuerySpec -> provider query text and request hints
- gateway: async search gateways (Google Custom Search, Serper, Brave)
"""

from reading_recommender.search.gateway import (
    SearchGateway,
    create_search_gateway,
)
from reading_recommender.search.query_adapter import to_filters, to_query_text
from reading_recommender.search.query_builder import QueryBuilder, build_query

__all__ = [
    "SearchGateway",
    "create_search_gateway",
    "to_filters",
    "to_query_text",
    "QueryBuilder",
    "build_query",
]
