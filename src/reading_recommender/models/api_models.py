"""
API request and response models for FastAPI endpoints.

This module defines the Pydantic models used for API request/response validation.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .analysis import ContentAnalysis
from .candidates import RecommendationResult
from .keywords import ContentCategory
from .pipeline_version import PipelineVersion
from .recommendations import CategoryDiagnostic


class RecommendRequest(BaseModel):
    """Request model for the recommendations endpoint."""

    summary: str = Field(..., description="Summary text to find similar content for")
    categories: Optional[List[ContentCategory]] = Field(
        default=None,
        description="Categories to search (default: book, article, video)",
    )
    limit: Optional[int] = Field(
        default=None, ge=1, le=50, description="Max results returned per category"
    )
    include_diagnostics: bool = Field(
        default=True, description="Include per-category diagnostics"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "summary": "A beginner's guide to transformers in NLP",
                "categories": ["book", "article", "video"],
                "limit": 5,
            }
        }
    }


class RecommendResponse(BaseModel):
    """Response model for the recommendations endpoint."""

    success: bool
    results: Dict[ContentCategory, List[RecommendationResult]] = Field(default_factory=dict)
    keywords: Optional[Dict[str, List[str]]] = None
    diagnostics: List[CategoryDiagnostic] = Field(default_factory=list)
    error: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Request model for content analysis."""

    title: str = Field(..., description="Title of the reading item")
    url: Optional[str] = Field(default=None, description="Optional URL of the item")


class AnalyzeResponse(BaseModel):
    """Response model for content analysis."""

    success: bool
    analysis: Optional[ContentAnalysis] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status", examples=["healthy"])
    version: str = Field(description="API version", examples=["1.0.0"])
    uptime_seconds: float = Field(description="Service uptime")


class VersionResponse(BaseModel):
    """Version information response."""

    api_version: str = Field(description="API version")
    pipeline_version: PipelineVersion = Field(
        description="Current pipeline version"
    )
