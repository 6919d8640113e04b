"""
Orchestration output models: per-category results plus diagnostics.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .candidates import RecommendationResult
from .keywords import ContentCategory, KeywordSet
from .pipeline_version import PipelineVersion


class CategoryStatus(str, Enum):
    """Outcome of one category's pipeline."""
    OK = "ok"
    SKIPPED = "skipped"  # No query producible (no main topics)
    FAILED = "failed"  # Search provider error


class ScoringMode(str, Enum):
    MECHANICAL = "mechanical"
    BLENDED = "blended"


class CategoryDiagnostic(BaseModel):
    """Non-fatal outcome report for one category."""
    category: ContentCategory
    status: CategoryStatus
    reason: Optional[str] = None
    query: Optional[str] = Field(default=None, description="Provider query text sent")
    candidates_count: int = 0
    dropped_count: int = Field(default=0, description="Hits dropped (malformed link or off-category source)")
    latency_ms: int = 0
    scoring_mode: ScoringMode = ScoringMode.MECHANICAL


class RecommendationReport(BaseModel):
    """
    Complete orchestration result.

    results always contains every requested category, in request order;
    each list is ordered by descending relevance.
    """
    results: Dict[ContentCategory, List[RecommendationResult]]
    diagnostics: List[CategoryDiagnostic] = Field(default_factory=list)
    keywords: KeywordSet
    pipeline_version: PipelineVersion
    latency_ms: int = 0

    def failed_categories(self) -> List[ContentCategory]:
        return [
            d.category for d in self.diagnostics
            if d.status == CategoryStatus.FAILED
        ]
