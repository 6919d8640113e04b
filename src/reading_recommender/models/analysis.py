"""
Content analysis model for a single reading item.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ContentAnalysis(BaseModel):
    """
    LLM analysis of a reading item (book, article, video, website).
    """
    description: str = Field(..., description="2-3 sentence description")
    summary: str = Field(..., description="1 sentence summary")
    key_points: List[str] = Field(default_factory=list, max_length=7)
    difficulty: Difficulty = Difficulty.BEGINNER
    time_to_consume: str = Field(default="5 minutes", description="Estimated time, e.g. '10 minutes'")
    tags: List[str] = Field(default_factory=list, max_length=7)
    analyzed_at: datetime

    @field_validator("key_points", "tags")
    @classmethod
    def strip_empty(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]
