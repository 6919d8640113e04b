"""
Reading Recommender - related books, articles and videos for a reading list.

Pipeline: keyword extraction (LLM) -> query building -> web search ->
tiered relevance scoring -> stable ranking, per content category.
"""

__version__ = "1.0.0"
