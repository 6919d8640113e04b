"""
Search candidate models.

Candidate -> ScoredCandidate -> RecommendationResult. All are immutable and
live only for the duration of one orchestration call.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..errors import MalformedCandidateError
from .keywords import ContentCategory


# Hosts treated as video platforms for category source enforcement
VIDEO_HOSTS = (
    "youtube.com",
    "youtu.be",
    "vimeo.com",
    "dailymotion.com",
)


def extract_source(link: str) -> str:
    """
    Hostname of a link with a leading "www." stripped.

    Examples:
        >>> extract_source("https://www.youtube.com/watch?v=abc")
        'youtube.com'
    """
    hostname = (urlparse(link).hostname or "").lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def is_absolute_url(link: str) -> bool:
    """True for syntactically valid absolute http(s) URLs."""
    try:
        parsed = urlparse(link)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def _host_matches(source: str, hosts) -> bool:
    return any(source == host or source.endswith("." + host) for host in hosts)


def is_video_source(source: str) -> bool:
    """True if a source hostname belongs to a known video platform."""
    return _host_matches(source, VIDEO_HOSTS)


class Candidate(BaseModel):
    """One raw search result."""
    title: str = Field(..., description="Result title")
    link: str = Field(..., description="Absolute URL of the result")
    snippet: str = Field(default="", description="Result description, may be empty")
    source: str = Field(default="", description="Hostname without leading www.")
    thumbnail_url: Optional[str] = Field(default=None, description="Optional preview image")

    model_config = {"frozen": True}

    @field_validator("snippet", mode="before")
    @classmethod
    def default_snippet(cls, v):
        return v or ""

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: str) -> str:
        v = v.strip()
        if not is_absolute_url(v):
            raise ValueError(f"Link is not an absolute URL: {v!r}")
        return v

    @model_validator(mode="before")
    @classmethod
    def derive_source(cls, data: Any) -> Any:
        # source is always derived from link, never trusted from input
        if isinstance(data, dict) and isinstance(data.get("link"), str):
            data = {**data, "source": extract_source(data["link"].strip())}
        return data

    @classmethod
    def from_search_item(
        cls,
        title: Optional[str],
        link: Optional[str],
        snippet: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> "Candidate":
        """
        Build a Candidate from loosely-typed provider fields.

        Raises:
            MalformedCandidateError: If the link is missing or not an absolute
                URL, or a field has the wrong type
        """
        if not isinstance(link, str) or not is_absolute_url(link.strip()):
            raise MalformedCandidateError(f"Search result has no usable link: {link!r}")
        try:
            return cls(
                title=title or "",
                link=link,
                snippet=snippet or "",
                thumbnail_url=thumbnail_url or None,
            )
        except ValidationError as e:
            raise MalformedCandidateError(
                f"Search result has invalid fields: {e.error_count()} error(s)"
            ) from e


class ScoredCandidate(Candidate):
    """A Candidate with its relevance score and the category it was searched for."""
    relevance_score: float = Field(..., ge=0.0, description="Relevance score, clamped to [0, score_max]")
    category: ContentCategory

    @classmethod
    def from_candidate(
        cls,
        candidate: Candidate,
        relevance_score: float,
        category: ContentCategory,
    ) -> "ScoredCandidate":
        return cls(
            **candidate.model_dump(),
            relevance_score=relevance_score,
            category=category,
        )

    def with_score(self, relevance_score: float) -> "ScoredCandidate":
        """Copy with a different score (used by blended scoring)."""
        return self.model_copy(update={"relevance_score": relevance_score})


class RecommendationResult(ScoredCandidate):
    """Caller-facing recommendation: same fields as ScoredCandidate."""

    @classmethod
    def from_scored(cls, scored: ScoredCandidate) -> "RecommendationResult":
        return cls(**scored.model_dump())

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
