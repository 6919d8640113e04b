"""
Ranking of scored candidates.
"""

from typing import List, Optional, Sequence

from reading_recommender.models.candidates import ScoredCandidate


class Ranker:
    """
    Orders scored candidates by descending relevance.

    The sort is stable: candidates with equal scores keep the order the
    search provider returned them in.
    """

    def rank(
        self,
        scored: Sequence[ScoredCandidate],
        limit: Optional[int] = None
    ) -> List[ScoredCandidate]:
        """
        Args:
            scored: Candidates in provider order
            limit: Optional maximum number of results to keep

        Returns:
            New list, highest score first
        """
        ranked = sorted(scored, key=lambda c: -c.relevance_score)
        if limit is not None:
            ranked = ranked[:max(0, limit)]
        return ranked


def rank(scored: Sequence[ScoredCandidate], limit: Optional[int] = None) -> List[ScoredCandidate]:
    return Ranker().rank(scored, limit)
