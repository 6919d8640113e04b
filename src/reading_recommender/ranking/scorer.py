"""
Rule-based relevance scoring of search candidates against a KeywordSet.

Each term found (case-insensitive substring) in "title snippet" adds its
tier weight:
- main topic: +3
- specific concept: +2
- related term: +1

The sum is clamped to [0, 10] so scores stay comparable across keyword sets
of different sizes. A term present in several tiers would count once per tier;
KeywordSet already guarantees a term is unique within its tier.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import structlog

from reading_recommender.config import settings
from reading_recommender.models.candidates import Candidate, ScoredCandidate
from reading_recommender.models.keywords import ContentCategory, KeywordSet


logger = structlog.get_logger(__name__)


@dataclass
class ScoringWeights:
    """
    Configurable per-tier weights and score cap.
    """
    main_topic: float = 3.0
    specific_concept: float = 2.0
    related_term: float = 1.0
    max_score: float = 10.0

    @classmethod
    def from_config(cls) -> "ScoringWeights":
        """Load weights from settings."""
        return cls(
            main_topic=settings.score_weight_main_topic,
            specific_concept=settings.score_weight_specific_concept,
            related_term=settings.score_weight_related_term,
            max_score=settings.score_max,
        )


def clamp_score(score: float, max_score: float = 10.0) -> float:
    """Clamp a score into [0, max_score]."""
    return max(0.0, min(max_score, score))


def count_matches(text: str, terms: Iterable[str]) -> int:
    """Number of terms occurring in text (text must already be lowercased)."""
    return sum(1 for term in terms if term and term.lower() in text)


class RelevanceScorer:
    """
    Deterministic tiered keyword scorer.

    Needs no external calls: the keyword set from the extraction step is the
    only input besides the candidate itself.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights.from_config()

    def score(self, candidate: Candidate, keywords: KeywordSet) -> float:
        """
        Score one candidate.

        Returns:
            Score in [0, weights.max_score]
        """
        text = f"{candidate.title} {candidate.snippet}".lower()

        raw_score = (
            self.weights.main_topic * count_matches(text, keywords.main_topics)
            + self.weights.specific_concept * count_matches(text, keywords.specific_concepts)
            + self.weights.related_term * count_matches(text, keywords.related_terms)
        )

        return clamp_score(raw_score, self.weights.max_score)

    def score_all(
        self,
        candidates: Iterable[Candidate],
        keywords: KeywordSet,
        category: ContentCategory
    ) -> List[ScoredCandidate]:
        """
        Score candidates for one category, preserving input order.
        """
        scored = [
            ScoredCandidate.from_candidate(
                candidate,
                relevance_score=self.score(candidate, keywords),
                category=category,
            )
            for candidate in candidates
        ]

        logger.debug(
            "candidates_scored",
            category=ContentCategory(category).value,
            count=len(scored),
            max_score=max((s.relevance_score for s in scored), default=0.0)
        )

        return scored
