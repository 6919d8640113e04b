"""
Unit tests for search candidate models.
"""

import pytest
from pydantic import ValidationError

from reading_recommender.errors import MalformedCandidateError
from reading_recommender.models.candidates import (
    Candidate,
    RecommendationResult,
    ScoredCandidate,
    extract_source,
    is_video_source,
)
from reading_recommender.models.keywords import ContentCategory


class TestSourceDerivation:
    """Test hostname-based helpers."""

    def test_extract_source_strips_www(self):
        assert extract_source("https://www.youtube.com/watch?v=abc") == "youtube.com"

    def test_extract_source_keeps_other_subdomains(self):
        assert extract_source("https://blog.example.org/post") == "blog.example.org"

    def test_source_is_derived_from_link(self):
        candidate = Candidate(title="t", link="https://WWW.Example.org/a", source="spoofed.com")
        assert candidate.source == "example.org"

    def test_is_video_source(self):
        assert is_video_source("youtube.com")
        assert is_video_source("m.youtube.com")
        assert not is_video_source("notyoutube.com")


class TestCandidate:
    """Test Candidate validation."""

    def test_snippet_defaults_to_empty(self):
        candidate = Candidate(title="t", link="https://example.org", snippet=None)
        assert candidate.snippet == ""

    def test_relative_link_rejected(self):
        with pytest.raises(ValidationError):
            Candidate(title="t", link="/relative/path")

    def test_non_http_link_rejected(self):
        with pytest.raises(ValidationError):
            Candidate(title="t", link="ftp://example.org/file")

    def test_from_search_item_missing_link(self):
        with pytest.raises(MalformedCandidateError):
            Candidate.from_search_item(title="No link", link=None)

    def test_from_search_item_invalid_link(self):
        with pytest.raises(MalformedCandidateError):
            Candidate.from_search_item(title="Bad", link="not a url")

    @pytest.mark.parametrize("fields", [
        {"title": "Int link", "link": 12345},
        {"title": "Dict link", "link": {"href": "https://example.org/a"}},
        {"title": 42, "link": "https://example.org/a"},
        {"title": "t", "link": "https://example.org/a", "snippet": ["list"]},
    ])
    def test_from_search_item_wrong_types(self, fields):
        with pytest.raises(MalformedCandidateError):
            Candidate.from_search_item(**fields)

    def test_from_search_item_tolerates_missing_fields(self):
        candidate = Candidate.from_search_item(title=None, link=" https://example.org/x ")
        assert candidate.title == ""
        assert candidate.link == "https://example.org/x"
        assert candidate.thumbnail_url is None


class TestScoredCandidate:
    """Test scored and caller-facing shapes."""

    def test_from_candidate_keeps_fields(self):
        candidate = Candidate(title="t", link="https://example.org/a", snippet="s")
        scored = ScoredCandidate.from_candidate(candidate, 4.0, ContentCategory.ARTICLE)
        assert scored.title == "t"
        assert scored.source == "example.org"
        assert scored.relevance_score == 4.0

    def test_negative_score_rejected(self):
        candidate = Candidate(title="t", link="https://example.org/a")
        with pytest.raises(ValidationError):
            ScoredCandidate.from_candidate(candidate, -1.0, ContentCategory.BOOK)

    def test_with_score_returns_copy(self):
        candidate = Candidate(title="t", link="https://example.org/a")
        scored = ScoredCandidate.from_candidate(candidate, 2.0, ContentCategory.BOOK)
        rescored = scored.with_score(6.0)
        assert rescored.relevance_score == 6.0
        assert scored.relevance_score == 2.0

    def test_recommendation_result_to_dict(self):
        candidate = Candidate(title="t", link="https://example.org/a")
        scored = ScoredCandidate.from_candidate(candidate, 2.0, ContentCategory.VIDEO)
        data = RecommendationResult.from_scored(scored).to_dict()
        assert data["category"] == "video"
        assert data["relevance_score"] == 2.0
        assert "thumbnail_url" not in data
