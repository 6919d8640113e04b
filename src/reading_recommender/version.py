"""
Version constants for the recommendation pipeline.

This module defines the component versions that influence recommendation output,
so results can be audited and reproduced.
"""

from typing import Optional

from .config import settings
from .models.pipeline_version import PipelineVersion

# API Version
API_VERSION = "1.0.0"

# Component versions (update these when implementations change)
SCHEMA_VERSION = "keywords-schema-v1"
QUERY_BUILDER_VERSION = "query-builder-1.0.0"
SCORER_VERSION = "tiered-scorer-1.0.0"
RANKER_VERSION = "stable-ranker-1.0.0"
ANALYZER_VERSION = "content-analyzer-1.0.0"


def get_current_pipeline_version(
    model_string: Optional[str] = None,
    search_provider: Optional[str] = None,
    scoring_mode: Optional[str] = None,
) -> PipelineVersion:
    """
    Get current pipeline version configuration.

    Args:
        model_string: "provider/model" actually used (default: from settings)
        search_provider: Search backend actually used (default: from settings)
        scoring_mode: "mechanical" or "blended" (default: from settings)

    Returns:
        PipelineVersion instance with current versions
    """
    if scoring_mode is None:
        scoring_mode = "blended" if settings.enable_ai_relevance_blend else "mechanical"

    return PipelineVersion(
        prompt_version=settings.prompt_version,
        schema_version=SCHEMA_VERSION,
        query_builder_version=QUERY_BUILDER_VERSION,
        scorer_version=SCORER_VERSION,
        ranker_version=RANKER_VERSION,
        model_version=model_string or f"{settings.llm_provider}/{settings.llm_model}",
        search_provider=search_provider or settings.search_provider,
        scoring_mode=scoring_mode,
    )
