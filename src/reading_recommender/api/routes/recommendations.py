"""
Recommendation API routes.

- POST /api/v1/recommendations - Related books, articles and videos for a summary
"""

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from ...config import settings
from ...errors import ExtractionFailure, InvalidInputError
from ...models.api_models import RecommendRequest, RecommendResponse
from ...recommendations.orchestrator import RecommendationOrchestrator, create_orchestrator


logger = structlog.get_logger(__name__)

router = APIRouter()


def get_orchestrator() -> RecommendationOrchestrator:
    """
    Build the orchestrator for a request from settings.

    Raises:
        HTTPException: 503 when an LLM or search provider is misconfigured
    """
    try:
        return create_orchestrator()
    except ValueError as e:
        logger.error("orchestrator_configuration_error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service misconfigured: {e}"
        )


@router.post("/recommendations", response_model=RecommendResponse, status_code=status.HTTP_200_OK)
async def recommend_endpoint(
    request: RecommendRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> RecommendResponse:
    """
    Find content related to a summary, grouped by category.

    Every requested category is present in the results; a category whose
    search failed maps to an empty list and is explained in diagnostics.

    Raises:
        HTTPException: 422 empty summary, 502 extraction failure, 504 timeout
    """
    logger.info(
        "recommendation_request_received",
        summary_length=len(request.summary),
        categories=[c.value for c in request.categories] if request.categories else None,
        limit=request.limit
    )

    try:
        report = await asyncio.wait_for(
            orchestrator.recommend(
                request.summary,
                categories=request.categories,
                limit=request.limit,
            ),
            timeout=settings.recommendation_timeout_seconds,
        )

    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid input: {e}"
        )

    except ExtractionFailure as e:
        logger.error("recommendation_extraction_failed", error=str(e), errors=e.errors)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Keyword extraction failed: {e}"
        )

    except asyncio.TimeoutError:
        logger.error("recommendation_timeout", timeout_seconds=settings.recommendation_timeout_seconds)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"Recommendation timed out after {settings.recommendation_timeout_seconds}s"
        )

    return RecommendResponse(
        success=True,
        results=report.results,
        keywords=report.keywords.to_llm_dict(),
        diagnostics=report.diagnostics if request.include_diagnostics else [],
    )
