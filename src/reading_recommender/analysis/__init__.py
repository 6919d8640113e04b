"""
Analysis package: LLM analysis of individual reading items.
"""

from reading_recommender.analysis.analyzer import ContentAnalyzer, fallback_analysis

__all__ = ["ContentAnalyzer", "fallback_analysis"]
