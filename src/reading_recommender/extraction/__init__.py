"""
Extraction package: text understanding layer.

Turns free text into a three-tier KeywordSet using LLM tool calling with
multi-stage output validation.

Main components:
- llm_client: LLM client abstraction (Ollama, OpenAI, DeepSeek, OpenRouter)
- extractor: KeywordExtractor orchestration
- validators: Multi-stage validation pipeline
- prompts: Versioned prompt templates
- tool_definitions: Function calling schemas
"""

from reading_recommender.extraction.extractor import KeywordExtractor, extract_keywords
from reading_recommender.extraction.llm_client import (
    LLMClient,
    LLMResponse,
    create_llm_client,
    create_llm_client_from_model_string,
)

__all__ = [
    "KeywordExtractor",
    "extract_keywords",
    "LLMClient",
    "LLMResponse",
    "create_llm_client",
    "create_llm_client_from_model_string",
]
