"""
LLM client abstraction layer (text understanding service).

Provides unified interface for multiple LLM providers:
- Ollama (self-hosted models: Qwen, Llama, DeepSeek, etc.)
- OpenAI API (GPT-4o, etc.)
- DeepSeek API (OpenAI-compatible)
- OpenRouter (multiple models via unified API, including Claude)

Key features:
- Function calling / tool use for structured output
- Plain-text JSON fallback when a model answers without a tool call
- Retry logic with exponential backoff
- Token usage tracking
- Timeout handling
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import ollama
import structlog
from openai import APIConnectionError, APITimeoutError, OpenAI

from reading_recommender.config import settings
from reading_recommender.extraction.tool_definitions import (
    format_tool_choice_for_provider,
    get_tool_name,
)


logger = structlog.get_logger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class LLMResponse:
    """
    Unified LLM response structure.

    tool_result holds the parsed tool call arguments when the model used the
    tool; raw_text holds the plain message content otherwise.
    """
    tool_result: Optional[Dict[str, Any]]

    # Metadata
    model: str
    provider: str
    raw_text: str = ""
    tokens_input: Optional[int] = None
    tokens_output: Optional[int] = None
    tokens_total: Optional[int] = None
    latency_ms: int = 0
    finish_reason: str = "unknown"

    # Raw response for debugging
    raw_response: Optional[Any] = None

    def payload(self) -> Union[Dict[str, Any], str]:
        """Structured output to validate: tool arguments, else raw text."""
        if self.tool_result is not None:
            return self.tool_result
        return self.raw_text


# ============================================================================
# ABSTRACT BASE CLASS
# ============================================================================

class LLMClient(ABC):
    """
    Abstract base class for LLM clients.

    All concrete implementations must provide the analyze() method that
    accepts a prompt plus tool definitions and returns the structured result.
    """

    provider_name: str = "unknown"

    def __init__(
        self,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 1000,
        timeout_seconds: int = 60,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.logger = logger.bind(
            llm_client=self.__class__.__name__,
            model=model
        )

    @property
    def model_string(self) -> str:
        """"provider/model" identifier used in versions and logs."""
        return f"{self.provider_name}/{self.model}"

    @abstractmethod
    def analyze(
        self,
        system_prompt: str,
        user_prompt: str,
        tool_definitions: List[Dict[str, Any]]
    ) -> LLMResponse:
        """
        Run a structured-output request using tool calling.

        The first tool definition is the one the model is asked to call.

        Args:
            system_prompt: System instructions
            user_prompt: User content
            tool_definitions: Tool definitions for function calling

        Returns:
            LLMResponse with tool call result (or raw text) and metadata

        Raises:
            Exception: On unrecoverable transport errors (after retries)
        """
        pass

    def _retry_with_backoff(self, func, *args, **kwargs):
        """
        Execute function with exponential backoff retry logic.

        Args:
            func: Function to execute
            *args, **kwargs: Arguments to pass to function

        Returns:
            Function result

        Raises:
            Last exception encountered after all retries exhausted
        """
        for attempt in range(self.max_retries):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if attempt == self.max_retries - 1:
                    self.logger.error(
                        "llm_call_failed_after_retries",
                        error=str(e),
                        attempts=self.max_retries
                    )
                    raise

                wait_time = self.retry_delay * (2 ** attempt)
                self.logger.warning(
                    "llm_call_retry",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                    wait_seconds=wait_time
                )
                time.sleep(wait_time)


# ============================================================================
# OLLAMA CLIENT
# ============================================================================

class OllamaClient(LLMClient):
    """
    Ollama client for self-hosted models.

    Supports tool calling models such as qwen2.5, llama3.1 and mistral.
    Requires Ollama running locally or accessible via base_url.
    """

    provider_name = "ollama"

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        **kwargs
    ):
        super().__init__(model=model, **kwargs)
        self.base_url = base_url
        self.client = ollama.Client(host=base_url, timeout=self.timeout_seconds)

    def analyze(
        self,
        system_prompt: str,
        user_prompt: str,
        tool_definitions: List[Dict[str, Any]]
    ) -> LLMResponse:
        """
        Analyze using Ollama with tool calling.

        Ollama supports tool use via the tools parameter (OpenAI format).
        """
        start_time = time.time()

        def _call_ollama():
            messages = [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ]

            return self.client.chat(
                model=self.model,
                messages=messages,
                tools=tool_definitions,
                options={
                    "temperature": self.temperature,
                    "num_predict": self.max_tokens,
                }
            )

        try:
            response = self._retry_with_backoff(_call_ollama)
        except Exception as e:
            self.logger.error(
                "ollama_request_failed",
                error=str(e),
                model=self.model
            )
            raise

        latency_ms = int((time.time() - start_time) * 1000)

        message = response.get('message', {}) or {}
        tool_calls = message.get('tool_calls') or []

        tool_result = None
        if tool_calls:
            function_args = tool_calls[0].get('function', {}).get('arguments', {})
            # Arguments may arrive as a JSON string
            if isinstance(function_args, str):
                function_args = json.loads(function_args)
            tool_result = dict(function_args)
        else:
            self.logger.warning("ollama_no_tool_call", model=self.model)

        tokens_input = response.get('prompt_eval_count')
        tokens_output = response.get('eval_count')
        tokens_total = tokens_input + tokens_output if tokens_input and tokens_output else None

        return LLMResponse(
            tool_result=tool_result,
            model=self.model,
            provider=self.provider_name,
            raw_text=message.get('content') or "",
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            tokens_total=tokens_total,
            latency_ms=latency_ms,
            finish_reason=response.get('done_reason') or 'stop',
            raw_response=response
        )


# ============================================================================
# OPENAI-COMPATIBLE CLIENT
# ============================================================================

class OpenAICompatibleClient(LLMClient):
    """
    OpenAI-compatible client for multiple providers.

    Works with:
    - OpenAI API (api.openai.com)
    - DeepSeek API (api.deepseek.com)
    - OpenRouter (openrouter.ai/api/v1)
    - Any other OpenAI-compatible endpoint

    Uses structured outputs via forced function calling.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        provider_name: str = "openai",
        **kwargs
    ):
        super().__init__(model=model, **kwargs)
        self.api_key = api_key
        self.base_url = base_url
        self.provider_name = provider_name

        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=self.timeout_seconds,
            max_retries=0  # Retries handled by _retry_with_backoff
        )

    def analyze(
        self,
        system_prompt: str,
        user_prompt: str,
        tool_definitions: List[Dict[str, Any]]
    ) -> LLMResponse:
        """
        Analyze using OpenAI-compatible API with function calling.
        """
        start_time = time.time()
        tool_name = get_tool_name(tool_definitions[0])

        def _call_openai():
            messages = [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ]

            return self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=tool_definitions,
                tool_choice=format_tool_choice_for_provider(self.provider_name, tool_name),
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )

        try:
            response = self._retry_with_backoff(_call_openai)

        except (APITimeoutError, APIConnectionError) as e:
            self.logger.error(
                "openai_api_error",
                error=str(e),
                error_type=type(e).__name__,
                model=self.model,
                provider=self.provider_name
            )
            raise

        except Exception as e:
            self.logger.error(
                "openai_request_failed",
                error=str(e),
                model=self.model,
                provider=self.provider_name
            )
            raise

        latency_ms = int((time.time() - start_time) * 1000)

        message = response.choices[0].message
        tool_calls = message.tool_calls

        tool_result = None
        if tool_calls:
            tool_result = json.loads(tool_calls[0].function.arguments)
        else:
            self.logger.warning("openai_no_tool_call", model=self.model, provider=self.provider_name)

        usage = response.usage

        return LLMResponse(
            tool_result=tool_result,
            model=self.model,
            provider=self.provider_name,
            raw_text=message.content or "",
            tokens_input=usage.prompt_tokens if usage else None,
            tokens_output=usage.completion_tokens if usage else None,
            tokens_total=usage.total_tokens if usage else None,
            latency_ms=latency_ms,
            finish_reason=response.choices[0].finish_reason,
            raw_response=response
        )


# ============================================================================
# CLIENT FACTORY
# ============================================================================

OPENAI_COMPATIBLE_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com",
    "openrouter": "https://openrouter.ai/api/v1",
}


def create_llm_client(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    **override_kwargs
) -> LLMClient:
    """
    Factory function to create appropriate LLM client based on configuration.

    Priority order for configuration:
    1. Explicit parameters passed to this function
    2. Settings from config

    Args:
        provider: Provider name ("ollama", "openai", "deepseek", "openrouter")
        model: Model name (provider-specific)
        **override_kwargs: Override any client parameters

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If provider is unknown or an API key is missing
    """
    provider = provider or settings.llm_provider
    model = model or settings.llm_model

    client_params = {
        "temperature": override_kwargs.get("temperature", settings.llm_temperature),
        "max_tokens": override_kwargs.get("max_tokens", settings.llm_max_tokens),
        "timeout_seconds": override_kwargs.get("timeout_seconds", settings.llm_timeout_seconds),
        "max_retries": override_kwargs.get("max_retries", settings.llm_max_retries),
        "retry_delay": override_kwargs.get("retry_delay", settings.llm_retry_delay_seconds),
    }

    logger.info(
        "creating_llm_client",
        provider=provider,
        model=model,
        temperature=client_params["temperature"]
    )

    if provider == "ollama":
        return OllamaClient(
            model=model,
            base_url=override_kwargs.get("base_url", settings.llm_api_base_url),
            **client_params
        )

    elif provider in OPENAI_COMPATIBLE_BASE_URLS:
        api_key = override_kwargs.get("api_key", settings.llm_api_key)
        if not api_key:
            raise ValueError(f"{provider} API key required (set LLM_API_KEY env var)")

        return OpenAICompatibleClient(
            model=model,
            api_key=api_key,
            base_url=override_kwargs.get("base_url", OPENAI_COMPATIBLE_BASE_URLS[provider]),
            provider_name=provider,
            **client_params
        )

    else:
        raise ValueError(
            f"Unknown LLM provider: {provider}. "
            f"Supported: ollama, openai, deepseek, openrouter"
        )


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def parse_model_string(model_string: str) -> Tuple[Optional[str], str]:
    """
    Parse model string in format "provider/model-name".

    Examples:
        "ollama/qwen2.5:7b" → ("ollama", "qwen2.5:7b")
        "openai/gpt-4o-mini" → ("openai", "gpt-4o-mini")
        "qwen2.5:7b" → (None, "qwen2.5:7b")  # No provider prefix

    Args:
        model_string: Model specification

    Returns:
        (provider, model_name) tuple. provider is None if no prefix.
    """
    if "/" in model_string:
        provider, model = model_string.split("/", 1)
        return provider, model
    return None, model_string


def create_llm_client_from_model_string(
    model_string: str,
    **override_kwargs
) -> LLMClient:
    """
    Create LLM client from model string (e.g., "ollama/qwen2.5:7b").

    Args:
        model_string: Model specification (may include provider prefix)
        **override_kwargs: Override any client parameters

    Returns:
        Configured LLMClient instance
    """
    provider_prefix, model_name = parse_model_string(model_string)

    return create_llm_client(
        provider=provider_prefix or settings.llm_provider,
        model=model_name,
        **override_kwargs
    )
