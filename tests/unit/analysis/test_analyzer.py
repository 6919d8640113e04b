"""
Unit tests for content analysis.
"""

import pytest

from reading_recommender.analysis.analyzer import ContentAnalyzer, fallback_analysis
from reading_recommender.errors import ExtractionFailure, InvalidInputError
from reading_recommender.models.analysis import Difficulty
from tests.fixtures.fakes import ANALYSIS_PAYLOAD, FakeLLMClient


class TestContentAnalyzer:

    def test_successful_analysis(self):
        llm = FakeLLMClient(ANALYSIS_PAYLOAD)
        analysis = ContentAnalyzer(llm_client=llm, strict=False).analyze(
            "Attention Is All You Need", "https://arxiv.org/abs/1706.03762"
        )

        assert analysis.summary == "Transformers explained for beginners."
        assert analysis.difficulty == Difficulty.INTERMEDIATE
        assert analysis.key_points == ["Self-attention", "Encoder-decoder", "Pretraining"]
        assert analysis.time_to_consume == "15 minutes"
        assert analysis.analyzed_at.tzinfo is not None

    def test_prompt_includes_title_and_url(self):
        llm = FakeLLMClient(ANALYSIS_PAYLOAD)
        ContentAnalyzer(llm_client=llm).analyze("Attention Is All You Need", "https://arxiv.org/abs/1706.03762")

        user_prompt = llm.calls[0]["user_prompt"]
        assert "Attention Is All You Need" in user_prompt
        assert "https://arxiv.org/abs/1706.03762" in user_prompt

    def test_nested_ai_analysis_accepted(self):
        payload = {
            "description": "d",
            "summary": "s",
            "aiAnalysis": {"keyPoints": ["k"], "difficulty": "advanced", "tags": ["t"]},
        }
        analysis = ContentAnalyzer(llm_client=FakeLLMClient(payload)).analyze("Title")
        assert analysis.difficulty == Difficulty.ADVANCED
        assert analysis.tags == ["t"]

    def test_malformed_output_falls_back(self):
        analyzer = ContentAnalyzer(llm_client=FakeLLMClient("no json here"), strict=False)

        analysis = analyzer.analyze("  Deep Learning  ")

        assert analysis.description == "Deep Learning"
        assert analysis.summary == "Deep Learning"
        assert analysis.difficulty == Difficulty.BEGINNER
        assert analysis.key_points == []

    def test_malformed_output_strict_raises(self):
        analyzer = ContentAnalyzer(llm_client=FakeLLMClient({"summary": "only"}), strict=True)

        with pytest.raises(ExtractionFailure) as exc_info:
            analyzer.analyze("Deep Learning")

        assert exc_info.value.errors

    def test_llm_error_raises(self):
        analyzer = ContentAnalyzer(llm_client=FakeLLMClient(ConnectionError("down")))

        with pytest.raises(ExtractionFailure):
            analyzer.analyze("Deep Learning")

    @pytest.mark.parametrize("title", ["", "   "])
    def test_empty_title_rejected(self, title):
        llm = FakeLLMClient(ANALYSIS_PAYLOAD)

        with pytest.raises(InvalidInputError):
            ContentAnalyzer(llm_client=llm).analyze(title)

        assert llm.calls == []


def test_fallback_analysis():
    analysis = fallback_analysis("Some Title")
    assert analysis.description == "Some Title"
    assert analysis.time_to_consume == "5 minutes"
