"""
Content analysis API routes.

- POST /api/v1/analyze - Description, summary, key points and tags for a reading item
"""

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from ...analysis.analyzer import ContentAnalyzer
from ...errors import ExtractionFailure, InvalidInputError
from ...models.api_models import AnalyzeRequest, AnalyzeResponse


logger = structlog.get_logger(__name__)

router = APIRouter()


def get_analyzer() -> ContentAnalyzer:
    """Build the analyzer for a request from settings."""
    try:
        return ContentAnalyzer()
    except ValueError as e:
        logger.error("analyzer_configuration_error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service misconfigured: {e}"
        )


@router.post("/analyze", response_model=AnalyzeResponse, status_code=status.HTTP_200_OK)
async def analyze_endpoint(
    request: AnalyzeRequest,
    analyzer: ContentAnalyzer = Depends(get_analyzer),
) -> AnalyzeResponse:
    """
    Analyze a reading item.

    Raises:
        HTTPException: 422 empty title, 502 text understanding failure
    """
    logger.info("analysis_request_received", has_url=bool(request.url))

    try:
        analysis = await asyncio.to_thread(analyzer.analyze, request.title, request.url)

    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid input: {e}"
        )

    except ExtractionFailure as e:
        logger.error("analysis_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Content analysis failed: {e}"
        )

    return AnalyzeResponse(success=True, analysis=analysis)
