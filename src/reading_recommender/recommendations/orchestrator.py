"""
Recommendation orchestrator: summary -> category -> ranked recommendations.

Coordinates:
1. One shared keyword extraction (fatal on failure)
2. Per category, concurrently: build query -> search -> score (-> blend) -> rank
3. Result assembly with one diagnostic per category

Only an empty summary or a failed extraction fails the whole call. Every
per-category problem degrades that category to an empty list and is reported
in its diagnostic.
"""

import asyncio
import time
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from reading_recommender.config import settings
from reading_recommender.errors import (
    ExtractionFailure,
    InvalidInputError,
    SearchFailure,
)
from reading_recommender.extraction.extractor import KeywordExtractor
from reading_recommender.models.candidates import (
    Candidate,
    RecommendationResult,
    is_video_source,
)
from reading_recommender.models.keywords import (
    DEFAULT_CATEGORIES,
    ContentCategory,
    KeywordSet,
    parse_categories,
)
from reading_recommender.models.recommendations import (
    CategoryDiagnostic,
    CategoryStatus,
    RecommendationReport,
    ScoringMode,
)
from reading_recommender.ranking.judge import RelevanceJudge
from reading_recommender.ranking.ranker import Ranker
from reading_recommender.ranking.scorer import RelevanceScorer
from reading_recommender.search.gateway import SearchGateway, create_search_gateway
from reading_recommender.search.query_adapter import to_filters, to_query_text
from reading_recommender.search.query_builder import QueryBuilder
from reading_recommender.version import get_current_pipeline_version


logger = structlog.get_logger(__name__)


def normalize_categories(
    categories: Optional[Iterable[ContentCategory]]
) -> List[ContentCategory]:
    """
    Deduplicate requested categories, keeping first-occurrence order.

    None or an empty list means the configured default categories.
    """
    unique: List[ContentCategory] = []
    for category in categories or ():
        category = ContentCategory(category)
        if category not in unique:
            unique.append(category)
    return unique or parse_categories(settings.default_categories) or list(DEFAULT_CATEGORIES)


def filter_category_sources(
    candidates: List[Candidate],
    category: ContentCategory
) -> Tuple[List[Candidate], int]:
    """
    Drop video-platform hits from non-video categories.

    Returns:
        (kept candidates, dropped count)
    """
    if category == ContentCategory.VIDEO:
        return candidates, 0
    kept = [c for c in candidates if not is_video_source(c.source)]
    return kept, len(candidates) - len(kept)


class RecommendationOrchestrator:
    """
    Composes extraction, query building, search, scoring and ranking.

    Service handles are injected; nothing here holds process-wide state.
    """

    def __init__(
        self,
        extractor: KeywordExtractor,
        gateway: SearchGateway,
        query_builder: Optional[QueryBuilder] = None,
        scorer: Optional[RelevanceScorer] = None,
        ranker: Optional[Ranker] = None,
        judge: Optional[RelevanceJudge] = None,
        enable_ai_blend: Optional[bool] = None,
        results_per_category: Optional[int] = None,
        enforce_category_sources: Optional[bool] = None
    ):
        """
        Initialize orchestrator.

        Args:
            extractor: Keyword extractor (wraps the LLM client)
            gateway: Search gateway
            query_builder: Optional query builder (default: QueryBuilder())
            scorer: Optional scorer (default: weights from settings)
            ranker: Optional ranker
            judge: Optional relevance judge for blended scoring
            enable_ai_blend: Blend mechanical and judged scores (default: from settings)
            results_per_category: Raw candidates scored per category (default: from settings)
            enforce_category_sources: Drop video hits outside video (default: from settings)
        """
        self.extractor = extractor
        self.gateway = gateway
        self.query_builder = query_builder or QueryBuilder()
        self.scorer = scorer or RelevanceScorer()
        self.ranker = ranker or Ranker()

        if enable_ai_blend is None:
            enable_ai_blend = settings.enable_ai_relevance_blend
        if enable_ai_blend and judge is None:
            judge = RelevanceJudge(extractor.llm_client, max_score=self.scorer.weights.max_score)
        self.judge = judge if enable_ai_blend else None

        self.results_per_category = results_per_category or settings.search_results_per_category
        self.enforce_category_sources = (
            settings.enforce_category_sources
            if enforce_category_sources is None else enforce_category_sources
        )

        self.logger = logger.bind(
            component="RecommendationOrchestrator",
            search_provider=gateway.provider_name
        )

    @property
    def scoring_mode(self) -> ScoringMode:
        return ScoringMode.BLENDED if self.judge is not None else ScoringMode.MECHANICAL

    async def recommend(
        self,
        summary: str,
        categories: Optional[Iterable[ContentCategory]] = None,
        limit: Optional[int] = None
    ) -> RecommendationReport:
        """
        Find ranked recommendations for every requested category.

        Args:
            summary: Text to find similar content for
            categories: Categories to search (default: book, article, video)
            limit: Optional max results per category

        Returns:
            RecommendationReport with one key and one diagnostic per category

        Raises:
            InvalidInputError: If summary is empty (no external call is made)
            ExtractionFailure: If keyword extraction fails
        """
        if summary is None or not summary.strip():
            raise InvalidInputError("Summary is empty")

        start_time = time.time()
        categories = normalize_categories(categories)

        self.logger.info(
            "recommendation_started",
            categories=[c.value for c in categories],
            summary_length=len(summary)
        )

        # The LLM client is synchronous: keep the event loop free
        keywords = await asyncio.to_thread(self.extractor.extract, summary)

        # Cancelling this coroutine cancels every in-flight category task
        outcomes = await asyncio.gather(*[
            self._run_category(summary, keywords, category, limit)
            for category in categories
        ])

        results: Dict[ContentCategory, List[RecommendationResult]] = {}
        diagnostics: List[CategoryDiagnostic] = []
        for category, (category_results, diagnostic) in zip(categories, outcomes):
            results[category] = category_results
            diagnostics.append(diagnostic)

        latency_ms = int((time.time() - start_time) * 1000)

        report = RecommendationReport(
            results=results,
            diagnostics=diagnostics,
            keywords=keywords,
            pipeline_version=get_current_pipeline_version(
                model_string=self.extractor.model_string,
                search_provider=self.gateway.provider_name,
                scoring_mode=self.scoring_mode.value,
            ),
            latency_ms=latency_ms,
        )

        self.logger.info(
            "recommendation_completed",
            results_count=sum(len(r) for r in results.values()),
            failed_categories=[c.value for c in report.failed_categories()],
            latency_ms=latency_ms
        )

        return report

    async def find_all_similar_content(
        self,
        summary: str,
        categories: Optional[Iterable[ContentCategory]] = None
    ) -> Dict[ContentCategory, List[RecommendationResult]]:
        """Category -> ranked results mapping, without diagnostics."""
        report = await self.recommend(summary, categories)
        return report.results

    async def find_similar_content(
        self,
        summary: str,
        category: ContentCategory
    ) -> List[RecommendationResult]:
        """Ranked results for a single category."""
        category = ContentCategory(category)
        results = await self.find_all_similar_content(summary, [category])
        return results[category]

    async def _run_category(
        self,
        summary: str,
        keywords: KeywordSet,
        category: ContentCategory,
        limit: Optional[int]
    ) -> Tuple[List[RecommendationResult], CategoryDiagnostic]:
        """
        One category's pipeline. Never raises for non-fatal problems.
        """
        start_time = time.time()
        log = self.logger.bind(category=category.value)

        def elapsed() -> int:
            return int((time.time() - start_time) * 1000)

        try:
            spec = self.query_builder.build(keywords, category)
        except InvalidInputError as e:
            log.warning("category_skipped", reason=str(e))
            return [], CategoryDiagnostic(
                category=category,
                status=CategoryStatus.SKIPPED,
                reason=str(e),
                latency_ms=elapsed(),
                scoring_mode=self.scoring_mode,
            )

        query_text = to_query_text(spec)
        filters = to_filters(spec, self.results_per_category)

        try:
            candidates, dropped = await self.gateway.search_with_stats(query_text, filters)
        except SearchFailure as e:
            log.error("category_search_failed", error=str(e), provider=e.provider)
            return [], self._failed(category, str(e), query_text, elapsed())
        except Exception as e:
            # Gateways outside this package may raise their own errors
            log.error("category_search_failed", error=str(e), error_type=type(e).__name__)
            return [], self._failed(category, f"{type(e).__name__}: {e}", query_text, elapsed())

        candidates = candidates[:self.results_per_category]
        if self.enforce_category_sources:
            candidates, off_category = filter_category_sources(candidates, category)
            dropped += off_category

        scored = self.scorer.score_all(candidates, keywords, category)

        scoring_mode = ScoringMode.MECHANICAL
        reason = None
        if self.judge is not None and scored:
            try:
                scored = await asyncio.to_thread(self.judge.blend, summary, scored)
                scoring_mode = ScoringMode.BLENDED
            except ExtractionFailure as e:
                reason = f"AI relevance blend unavailable, mechanical scores kept: {e}"
                log.warning("relevance_blend_failed", error=str(e))

        ranked = self.ranker.rank(scored, limit)

        log.info(
            "category_completed",
            candidates_count=len(candidates),
            dropped_count=dropped,
            returned_count=len(ranked)
        )

        return (
            [RecommendationResult.from_scored(s) for s in ranked],
            CategoryDiagnostic(
                category=category,
                status=CategoryStatus.OK,
                reason=reason,
                query=query_text,
                candidates_count=len(candidates),
                dropped_count=dropped,
                latency_ms=elapsed(),
                scoring_mode=scoring_mode,
            ),
        )

    def _failed(
        self,
        category: ContentCategory,
        reason: str,
        query_text: str,
        latency_ms: int
    ) -> CategoryDiagnostic:
        return CategoryDiagnostic(
            category=category,
            status=CategoryStatus.FAILED,
            reason=reason,
            query=query_text,
            latency_ms=latency_ms,
            scoring_mode=self.scoring_mode,
        )


def create_orchestrator(
    model_override: Optional[str] = None,
    search_provider: Optional[str] = None
) -> RecommendationOrchestrator:
    """
    Build an orchestrator from settings.

    Args:
        model_override: Optional "provider/model" string for the LLM
        search_provider: Optional search provider name

    Raises:
        ValueError: On unknown providers or missing credentials
    """
    return RecommendationOrchestrator(
        extractor=KeywordExtractor(model_override=model_override),
        gateway=create_search_gateway(search_provider),
    )
