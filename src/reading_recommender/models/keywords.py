"""
Keyword and content category models.

A KeywordSet is the output of one extraction call: three importance tiers of
short terms. Tier invariants are enforced on construction:
- terms are stripped, empty terms dropped
- unique within a tier (case-insensitive, first spelling kept)
- a term lives in one tier only; the first tier encountered wins
  (main_topics > specific_concepts > related_terms)
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field, model_validator


class ContentCategory(str, Enum):
    """Content categories a recommendation can be requested for."""
    BOOK = "book"
    ARTICLE = "article"
    VIDEO = "video"

    # Extensions used by some reading-list integrations
    WEBSITE = "website"
    REPORT = "report"
    ACADEMIC = "academic"


DEFAULT_CATEGORIES: Tuple[ContentCategory, ...] = (
    ContentCategory.BOOK,
    ContentCategory.ARTICLE,
    ContentCategory.VIDEO,
)

TIER_ORDER = ("main_topics", "specific_concepts", "related_terms")


def parse_categories(value: str) -> List[ContentCategory]:
    """
    Parse a comma-separated category list ("book,video").

    Raises:
        ValueError: On unknown category names
    """
    categories = []
    for raw in value.split(","):
        name = raw.strip().lower()
        if name:
            categories.append(ContentCategory(name))
    return categories


def normalize_tiers(
    tiers: Dict[str, Iterable[str]]
) -> Tuple[Dict[str, Tuple[str, ...]], List[str]]:
    """
    Apply tier invariants to raw term lists.

    Args:
        tiers: Mapping of tier name (TIER_ORDER) to raw terms

    Returns:
        (normalized tiers, list of human-readable notes on dropped terms)
    """
    seen: Dict[str, str] = {}
    normalized: Dict[str, Tuple[str, ...]] = {}
    notes: List[str] = []

    for tier in TIER_ORDER:
        kept = []
        for term in tiers.get(tier) or ():
            cleaned = " ".join(str(term).split())
            if not cleaned:
                continue
            key = cleaned.lower()
            if key in seen:
                if seen[key] == tier:
                    notes.append(f"Duplicate term removed in {tier}: {cleaned}")
                else:
                    notes.append(
                        f"Term '{cleaned}' already in {seen[key]}, removed from {tier}"
                    )
                continue
            seen[key] = tier
            kept.append(cleaned)
        normalized[tier] = tuple(kept)

    return normalized, notes


class KeywordSet(BaseModel):
    """
    Three-tier weighted keyword set extracted from free text.

    Immutable once built; shared read-only across per-category pipelines.
    """
    main_topics: Tuple[str, ...] = Field(default=(), description="Highest-weight subjects")
    specific_concepts: Tuple[str, ...] = Field(default=(), description="Medium-weight technical terms")
    related_terms: Tuple[str, ...] = Field(default=(), description="Lowest-weight broader terms")
    authors: Tuple[str, ...] = Field(default=(), description="Authors/experts mentioned (not scored)")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def enforce_tier_invariants(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized, _ = normalize_tiers({tier: data.get(tier) for tier in TIER_ORDER})
        return {**data, **normalized}

    @classmethod
    def from_tiers(
        cls,
        main_topics: Iterable[str] = (),
        specific_concepts: Iterable[str] = (),
        related_terms: Iterable[str] = (),
        authors: Iterable[str] = (),
    ) -> "KeywordSet":
        """Build a KeywordSet from any iterables of terms."""
        return cls(
            main_topics=tuple(main_topics),
            specific_concepts=tuple(specific_concepts),
            related_terms=tuple(related_terms),
            authors=tuple(a.strip() for a in authors if a and a.strip()),
        )

    def all_terms(self) -> Tuple[str, ...]:
        """All scored terms in tier order."""
        return self.main_topics + self.specific_concepts + self.related_terms

    def is_empty(self) -> bool:
        return not self.all_terms()

    def to_llm_dict(self) -> Dict[str, List[str]]:
        """camelCase shape used in prompts and API payloads."""
        return {
            "mainTopics": list(self.main_topics),
            "specificConcepts": list(self.specific_concepts),
            "relatedTerms": list(self.related_terms),
        }
