"""
Ranking package: relevance scoring, optional AI blend, stable ranking.
"""

from reading_recommender.ranking.judge import RelevanceJudge, blend_scores
from reading_recommender.ranking.ranker import Ranker, rank
from reading_recommender.ranking.scorer import RelevanceScorer, ScoringWeights, clamp_score

__all__ = [
    "RelevanceJudge",
    "blend_scores",
    "Ranker",
    "rank",
    "RelevanceScorer",
    "ScoringWeights",
    "clamp_score",
]
