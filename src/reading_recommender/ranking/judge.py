"""
AI relevance judgment for the blended scoring mode.

The LLM scores every candidate of a category (0-10) against the original
summary in one call; the final score is the mean of the mechanical and the
judged score. Any failure here is reported to the caller, which keeps the
mechanical scores.
"""

from typing import List, Optional, Sequence

import structlog

from reading_recommender.errors import ExtractionFailure
from reading_recommender.extraction.llm_client import LLMClient
from reading_recommender.extraction.prompts import (
    RELEVANCE_SYSTEM_PROMPT,
    build_relevance_user_prompt,
)
from reading_recommender.extraction.tool_definitions import get_relevance_tool_definition
from reading_recommender.extraction.validators import (
    format_validation_report,
    validate_relevance_output,
)
from reading_recommender.models.candidates import ScoredCandidate
from reading_recommender.ranking.scorer import clamp_score


logger = structlog.get_logger(__name__)


def blend_scores(mechanical: float, judged: float, max_score: float = 10.0) -> float:
    """Arithmetic mean of the two scores, clamped."""
    return clamp_score((mechanical + judged) / 2.0, max_score)


class RelevanceJudge:
    """
    Asks the text understanding service how relevant each candidate is.
    """

    def __init__(self, llm_client: LLMClient, max_score: float = 10.0):
        self.llm_client = llm_client
        self.max_score = max_score
        self.logger = logger.bind(component="RelevanceJudge", model=llm_client.model)

    def judge(self, summary: str, candidates: Sequence[ScoredCandidate]) -> List[float]:
        """
        One judged score per candidate, in input order.

        Raises:
            ExtractionFailure: On LLM failure or unusable output
        """
        if not candidates:
            return []

        results = [
            {"title": c.title, "snippet": c.snippet, "source": c.source}
            for c in candidates
        ]

        try:
            response = self.llm_client.analyze(
                system_prompt=RELEVANCE_SYSTEM_PROMPT,
                user_prompt=build_relevance_user_prompt(summary, results),
                tool_definitions=[get_relevance_tool_definition(len(results))]
            )
        except Exception as e:
            raise ExtractionFailure(f"Relevance judgment failed: {e}") from e

        validation = validate_relevance_output(response.payload(), expected_count=len(results))
        if not validation.valid:
            raise ExtractionFailure(
                f"Malformed relevance judgment: {format_validation_report(validation)}",
                errors=validation.errors
            )

        return validation.cleaned_data["scores"]

    def blend(
        self,
        summary: str,
        candidates: Sequence[ScoredCandidate]
    ) -> List[ScoredCandidate]:
        """
        Candidates with blended scores, input order preserved.

        Raises:
            ExtractionFailure: If judgment fails (caller falls back to mechanical scores)
        """
        judged = self.judge(summary, candidates)

        blended = [
            c.with_score(blend_scores(c.relevance_score, score, self.max_score))
            for c, score in zip(candidates, judged)
        ]

        self.logger.debug("relevance_blended", count=len(blended))
        return blended
