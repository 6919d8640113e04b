"""
Unit tests for AI relevance judgment and score blending.
"""

import pytest

from reading_recommender.errors import ExtractionFailure
from reading_recommender.models.candidates import ScoredCandidate
from reading_recommender.models.keywords import ContentCategory
from reading_recommender.ranking.judge import RelevanceJudge, blend_scores
from tests.fixtures.fakes import FakeLLMClient, make_candidate


def scored(title: str, score: float) -> ScoredCandidate:
    return ScoredCandidate.from_candidate(make_candidate(title), score, ContentCategory.VIDEO)


class TestBlendScores:
    """Test the arithmetic mean blend."""

    def test_mean(self):
        assert blend_scores(8.0, 4.0) == 6.0

    def test_clamped(self):
        assert blend_scores(10.0, 14.0) == 10.0


class TestRelevanceJudge:
    """Test judged scores and failure modes."""

    def test_blend_uses_judged_scores_in_order(self):
        client = FakeLLMClient({"scores": [10, 0]})
        judge = RelevanceJudge(client)

        blended = judge.blend("summary", [scored("a", 6.0), scored("b", 4.0)])

        assert [c.relevance_score for c in blended] == [8.0, 2.0]
        assert [c.title for c in blended] == ["a", "b"]

    def test_judge_prompt_contains_candidates(self):
        client = FakeLLMClient({"scores": [5]})
        RelevanceJudge(client).judge("my summary", [scored("Attention paper", 1.0)])

        call = client.calls[0]
        assert "my summary" in call["user_prompt"]
        assert "Attention paper" in call["user_prompt"]

    def test_no_candidates_makes_no_call(self):
        client = FakeLLMClient({"scores": []})
        assert RelevanceJudge(client).judge("s", []) == []
        assert client.calls == []

    def test_wrong_count_raises(self):
        client = FakeLLMClient({"scores": [5]})
        with pytest.raises(ExtractionFailure):
            RelevanceJudge(client).blend("s", [scored("a", 1.0), scored("b", 1.0)])

    def test_llm_error_raises(self):
        client = FakeLLMClient(TimeoutError("slow"))
        with pytest.raises(ExtractionFailure):
            RelevanceJudge(client).judge("s", [scored("a", 1.0)])
