"""
Content analysis of a single reading item (title + optional URL).

Produces a description, one-line summary, key points, difficulty, estimated
time to consume and tags. Unless strict mode is on, malformed LLM output
degrades to a minimal analysis built from the title.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog

from reading_recommender.config import settings
from reading_recommender.errors import ExtractionFailure, InvalidInputError
from reading_recommender.extraction.llm_client import (
    LLMClient,
    create_llm_client_from_model_string,
)
from reading_recommender.extraction.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    build_analysis_user_prompt,
)
from reading_recommender.extraction.tool_definitions import get_analysis_tool_definition
from reading_recommender.extraction.validators import (
    format_validation_report,
    validate_analysis_output,
)
from reading_recommender.models.analysis import ContentAnalysis, Difficulty


logger = structlog.get_logger(__name__)


def fallback_analysis(title: str) -> ContentAnalysis:
    """Minimal analysis used when the LLM answer is unusable."""
    return ContentAnalysis(
        description=title,
        summary=title,
        difficulty=Difficulty.BEGINNER,
        time_to_consume="5 minutes",
        analyzed_at=datetime.now(timezone.utc),
    )


class ContentAnalyzer:
    """
    LLM-backed analyzer for reading list items.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        model_override: Optional[str] = None,
        strict: Optional[bool] = None
    ):
        if llm_client is None:
            llm_client = create_llm_client_from_model_string(
                model_override or f"{settings.llm_provider}/{settings.llm_model}"
            )
        self.llm_client = llm_client
        self.strict = settings.analysis_strict if strict is None else strict
        self.logger = logger.bind(component="ContentAnalyzer", model=llm_client.model)

    def analyze(self, title: str, url: Optional[str] = None) -> ContentAnalysis:
        """
        Analyze a reading item.

        Raises:
            InvalidInputError: If title is empty
            ExtractionFailure: On LLM failure, or malformed output in strict mode
        """
        if title is None or not title.strip():
            raise InvalidInputError("Title to analyze is empty")

        title = title.strip()
        self.logger.info("content_analysis_started", has_url=bool(url))

        try:
            response = self.llm_client.analyze(
                system_prompt=ANALYSIS_SYSTEM_PROMPT,
                user_prompt=build_analysis_user_prompt(title, url),
                tool_definitions=[get_analysis_tool_definition()]
            )
        except Exception as e:
            self.logger.error("content_analysis_llm_failed", error=str(e))
            raise ExtractionFailure(f"Text understanding service failed: {e}") from e

        validation = validate_analysis_output(response.payload())

        if not validation.valid:
            if self.strict:
                raise ExtractionFailure(
                    f"Malformed content analysis: {format_validation_report(validation)}",
                    errors=validation.errors
                )
            self.logger.warning(
                "content_analysis_fallback",
                errors=validation.errors
            )
            return fallback_analysis(title)

        analysis = ContentAnalysis(
            **validation.cleaned_data,
            analyzed_at=datetime.now(timezone.utc),
        )

        self.logger.info(
            "content_analysis_completed",
            difficulty=analysis.difficulty.value,
            tags_count=len(analysis.tags),
            warnings_count=len(validation.warnings)
        )

        return analysis
