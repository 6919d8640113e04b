"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- HTTP clients
- Mock settings/configuration
- Fake LLM clients and search gateways
- Sample keywords and candidates
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from reading_recommender.api.app import app
from reading_recommender.config import Settings
from reading_recommender.extraction.extractor import KeywordExtractor
from reading_recommender.models.keywords import ContentCategory, KeywordSet
from reading_recommender.ranking.scorer import RelevanceScorer, ScoringWeights
from .fixtures.fakes import (
    TRANSFORMERS_KEYWORDS_PAYLOAD,
    FakeLLMClient,
    FakeSearchGateway,
    make_candidate,
)


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient instance
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_settings() -> Settings:
    """
    Settings with safe test defaults (no real providers configured).
    """
    return Settings(
        llm_provider="ollama",
        llm_model="test-model",
        search_provider="google",
        google_search_api_key="",
        enable_ai_relevance_blend=False,
        log_level="INFO",
        log_json=False,
    )


@pytest.fixture
def transformers_keywords() -> KeywordSet:
    """KeywordSet for "A beginner's guide to transformers in NLP"."""
    return KeywordSet.from_tiers(
        main_topics=["transformers", "NLP"],
        specific_concepts=["attention mechanism", "self-attention"],
        related_terms=["deep learning"],
    )


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    """LLM client answering every call with the transformers keywords."""
    return FakeLLMClient(TRANSFORMERS_KEYWORDS_PAYLOAD)


@pytest.fixture
def extractor(fake_llm) -> KeywordExtractor:
    return KeywordExtractor(llm_client=fake_llm)


@pytest.fixture
def scorer() -> RelevanceScorer:
    """Scorer with default 3/2/1 weights, independent of the environment."""
    return RelevanceScorer(ScoringWeights())


@pytest.fixture
def sample_results():
    """Search results per category for the transformers summary."""
    return {
        ContentCategory.BOOK: [
            make_candidate("Deep Learning with Python", "A practical book"),
            make_candidate("Transformers for NLP", "Attention mechanism and self-attention in depth"),
        ],
        ContentCategory.ARTICLE: [
            make_candidate("Understanding Self-Attention in Transformers", "An NLP primer"),
            make_candidate("Cooking pasta", "Unrelated"),
        ],
        ContentCategory.VIDEO: [
            make_candidate(
                "Transformers explained",
                "NLP video lecture",
                link="https://www.youtube.com/watch?v=abc123",
            ),
        ],
    }


@pytest.fixture
def fake_gateway(sample_results) -> FakeSearchGateway:
    return FakeSearchGateway(sample_results)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (API, end-to-end)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests that may take longer to run"
    )
