"""
Keyword extractor: free text -> three-tier KeywordSet.

Coordinates:
1. Input check (empty text never reaches the LLM)
2. Prompt building (versioned system prompt + truncated text)
3. LLM call with the extract_keywords tool
4. Multi-stage validation of the tool output

No retries at this layer: transport retries belong to the LLM client, and a
malformed answer is reported as ExtractionFailure.
"""

import time
from typing import Optional

import structlog

from reading_recommender.config import settings
from reading_recommender.errors import ExtractionFailure, InvalidInputError
from reading_recommender.extraction.llm_client import (
    LLMClient,
    create_llm_client_from_model_string,
)
from reading_recommender.extraction.prompts import build_keywords_prompt
from reading_recommender.extraction.tool_definitions import get_keyword_tool_definition
from reading_recommender.extraction.validators import (
    format_validation_report,
    keywords_from_validation,
    validate_keywords_output,
)
from reading_recommender.models.keywords import KeywordSet


logger = structlog.get_logger(__name__)


class KeywordExtractor:
    """
    Extracts weighted search keywords from a summary, title or description.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        model_override: Optional[str] = None,
        prompt_version: Optional[str] = None
    ):
        """
        Initialize extractor.

        Args:
            llm_client: Optional pre-configured LLM client
            model_override: Optional model string (e.g., "openai/gpt-4o-mini")
            prompt_version: Optional prompt version (default: from settings)
        """
        if llm_client is None:
            llm_client = create_llm_client_from_model_string(
                model_override or f"{settings.llm_provider}/{settings.llm_model}"
            )

        self.llm_client = llm_client
        self.prompt_version = prompt_version or settings.prompt_version
        self.logger = logger.bind(
            component="KeywordExtractor",
            model=llm_client.model
        )

    @property
    def model_string(self) -> str:
        return self.llm_client.model_string

    def extract(self, text: str) -> KeywordSet:
        """
        Extract a KeywordSet from text.

        Args:
            text: Free text (summary, title, description)

        Returns:
            KeywordSet honoring the tier invariants

        Raises:
            InvalidInputError: If text is empty or whitespace-only
            ExtractionFailure: If the LLM call fails or its output is unusable
        """
        if text is None or not text.strip():
            raise InvalidInputError("Text to extract keywords from is empty")

        start_time = time.time()
        system_prompt, user_prompt = build_keywords_prompt(text, self.prompt_version)

        self.logger.info("keyword_extraction_started", text_length=len(text))

        try:
            response = self.llm_client.analyze(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                tool_definitions=[get_keyword_tool_definition()]
            )
        except Exception as e:
            self.logger.error(
                "keyword_extraction_llm_failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise ExtractionFailure(f"Text understanding service failed: {e}") from e

        validation = validate_keywords_output(response.payload())

        if not validation.valid:
            self.logger.warning(
                "keyword_extraction_invalid_output",
                errors=validation.errors
            )
            raise ExtractionFailure(
                f"Malformed keyword extraction output: {format_validation_report(validation)}",
                errors=validation.errors
            )

        keywords = keywords_from_validation(validation)

        self.logger.info(
            "keyword_extraction_completed",
            main_topics_count=len(keywords.main_topics),
            specific_concepts_count=len(keywords.specific_concepts),
            related_terms_count=len(keywords.related_terms),
            warnings_count=len(validation.warnings),
            tokens_total=response.tokens_total,
            latency_ms=int((time.time() - start_time) * 1000)
        )

        return keywords


def extract_keywords(text: str, model_override: Optional[str] = None) -> KeywordSet:
    """
    Extract keywords using default or custom configuration.

    Example:
        >>> keywords = extract_keywords("A beginner's guide to transformers in NLP")
        >>> keywords.main_topics
        ('transformers', 'NLP')
    """
    return KeywordExtractor(model_override=model_override).extract(text)
