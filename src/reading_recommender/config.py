"""
Application configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    """

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Monitoring
    enable_metrics: bool = True

    # LLM Provider Configuration (text understanding service)
    llm_provider: str = "ollama"  # "ollama" | "openai" | "deepseek" | "openrouter"
    llm_model: str = "qwen2.5:7b"  # Model name (provider-specific)
    llm_api_key: str = ""  # Optional for Ollama, required for cloud providers
    llm_api_base_url: str = "http://localhost:11434"  # Ollama default
    llm_temperature: float = 0.0  # Keyword extraction must be reproducible
    llm_max_tokens: int = 1000
    llm_timeout_seconds: int = 60
    llm_max_retries: int = 3
    llm_retry_delay_seconds: float = 1.0

    # Search provider configuration
    search_provider: str = "google"  # "google" | "serper" | "brave"
    google_search_api_key: str = ""
    google_search_engine_id: str = ""
    serper_api_key: str = ""
    brave_api_key: str = ""
    search_timeout_seconds: float = 10.0
    search_results_per_category: int = 10  # Raw candidates scored per category

    # Relevance scoring weights (tiered keyword matching)
    score_weight_main_topic: float = 3.0
    score_weight_specific_concept: float = 2.0
    score_weight_related_term: float = 1.0
    score_max: float = 10.0
    enable_ai_relevance_blend: bool = False

    # Orchestration
    default_categories: str = "book,article,video"  # Comma-separated
    enforce_category_sources: bool = True
    recommendation_timeout_seconds: float = 60.0

    # Prompt configuration
    prompt_version: str = "v1.1"
    prompt_max_text_length: int = 6000  # Truncate long summaries

    # Content analysis
    analysis_strict: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Global settings instance
settings = Settings()
