"""
Recommendations package: end-to-end orchestration across content categories.
"""

from reading_recommender.recommendations.orchestrator import (
    RecommendationOrchestrator,
    create_orchestrator,
)

__all__ = ["RecommendationOrchestrator", "create_orchestrator"]
