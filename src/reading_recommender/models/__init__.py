# Data models for the recommendation pipeline

from .pipeline_version import PipelineVersion
from .keywords import DEFAULT_CATEGORIES, ContentCategory, KeywordSet
from .candidates import Candidate, RecommendationResult, ScoredCandidate
from .queries import QuerySpec
from .recommendations import (
    CategoryDiagnostic,
    CategoryStatus,
    RecommendationReport,
    ScoringMode,
)
from .analysis import ContentAnalysis, Difficulty

__all__ = [
    "PipelineVersion",
    "DEFAULT_CATEGORIES",
    "ContentCategory",
    "KeywordSet",
    "Candidate",
    "ScoredCandidate",
    "RecommendationResult",
    "QuerySpec",
    "CategoryDiagnostic",
    "CategoryStatus",
    "RecommendationReport",
    "ScoringMode",
    "ContentAnalysis",
    "Difficulty",
]
