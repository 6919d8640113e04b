"""
Version information endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Query

from ...models.api_models import VersionResponse
from ...version import API_VERSION, get_current_pipeline_version

router = APIRouter()


@router.get("/version", response_model=VersionResponse)
async def get_version(
    search_provider: Optional[str] = Query(default=None, pattern="^(google|serper|brave)$")
) -> VersionResponse:
    """
    Get current API and pipeline version information.

    Args:
        search_provider: Search backend to report (default: configured one)
    """
    return VersionResponse(
        api_version=API_VERSION,
        pipeline_version=get_current_pipeline_version(search_provider=search_provider),
    )
