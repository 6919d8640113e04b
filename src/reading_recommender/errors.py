"""
Exception taxonomy for the recommendation pipeline.

Fatal vs. recoverable is decided by the caller:
- InvalidInputError: empty input, or no main topics to query with
- ExtractionFailure: text understanding output unusable (fatal for an orchestration)
- SearchFailure: search provider transport/auth error (degrades one category)
- MalformedCandidateError: a search hit without a usable link (hit is dropped)
"""

from typing import List, Optional


class RecommendationError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputError(RecommendationError, ValueError):
    """Input cannot produce any useful work (empty text, no main topics)."""


class ExtractionFailure(RecommendationError):
    """
    Keyword extraction or content analysis produced unusable output.

    Attributes:
        errors: Validation errors collected while parsing the LLM output
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class SearchFailure(RecommendationError):
    """
    Search provider call failed (transport, auth, HTTP status).

    Attributes:
        provider: Search provider name
        category: Content category being searched, if known
    """

    def __init__(self, message: str, provider: str = "", category: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.category = category


class MalformedCandidateError(RecommendationError, ValueError):
    """A search result lacks a usable absolute link."""
