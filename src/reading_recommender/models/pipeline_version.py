"""
Pipeline version model for reproducible recommendations.

Tracks every component version that influences the output: the same version
parameters plus the same external responses yield the same ranked lists.
"""

from pydantic import BaseModel, Field


class PipelineVersion(BaseModel):
    """
    Immutable version contract for the recommendation pipeline.
    """

    prompt_version: str = Field(
        description="Keyword extraction prompt version", examples=["v1.1"]
    )
    schema_version: str = Field(
        description="Tool calling schema version for LLM output", examples=["keywords-schema-v1"]
    )
    query_builder_version: str = Field(
        description="QuerySpec construction rules version", examples=["query-builder-1.0.0"]
    )
    scorer_version: str = Field(
        description="Relevance scoring algorithm version", examples=["tiered-scorer-1.0.0"]
    )
    ranker_version: str = Field(
        description="Ranking algorithm version", examples=["stable-ranker-1.0.0"]
    )
    model_version: str = Field(
        description="LLM used for text understanding", examples=["ollama/qwen2.5:7b"]
    )
    search_provider: str = Field(
        description="Web search backend", examples=["google"]
    )
    scoring_mode: str = Field(
        description="mechanical or blended", examples=["mechanical"]
    )

    model_config = {"frozen": True}

    def to_repr(self) -> str:
        """
        Short representation for logging and metrics.
        """
        return (
            f"Pipeline-{self.prompt_version}-{self.scorer_version}-"
            f"{self.model_version}-{self.search_provider}"
        )
