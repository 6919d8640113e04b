"""
Provider-agnostic search query model.
"""

from typing import Tuple

from pydantic import BaseModel, Field

from .keywords import ContentCategory


class QuerySpec(BaseModel):
    """
    Structured search query for one content category.

    Semantics:
    - required_any_of: at least one of these terms should appear
    - required_all_of: every group must hold; a group holds when any of its
      terms appears
    - category_filter: category-specific textual refinement (site filters,
      refinement words, exclusions)
    """
    category: ContentCategory
    required_any_of: Tuple[str, ...] = Field(..., min_length=1)
    required_all_of: Tuple[Tuple[str, ...], ...] = Field(default=())
    category_filter: str = ""

    model_config = {"frozen": True}
