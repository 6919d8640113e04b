"""
Unit tests for LLM client abstraction layer.

Tests client initialization, model string parsing, retry logic,
and mock LLM responses without requiring actual API calls.
"""

import json
from unittest.mock import Mock, patch

import pytest

from reading_recommender.extraction.llm_client import (
    LLMResponse,
    OllamaClient,
    OpenAICompatibleClient,
    create_llm_client,
    create_llm_client_from_model_string,
    parse_model_string,
)
from reading_recommender.extraction.tool_definitions import get_keyword_tool_definition


KEYWORDS_ARGS = {
    "mainTopics": ["transformers"],
    "specificConcepts": ["self-attention"],
    "relatedTerms": ["deep learning"],
}


def make_openai_response(tool_arguments=None, content=None):
    """Build a mock chat.completions response."""
    message = Mock()
    if tool_arguments is None:
        message.tool_calls = None
    else:
        tool_call = Mock()
        tool_call.function.name = "extract_keywords"
        tool_call.function.arguments = json.dumps(tool_arguments)
        message.tool_calls = [tool_call]
    message.content = content

    choice = Mock()
    choice.message = message
    choice.finish_reason = "tool_calls" if tool_arguments is not None else "stop"

    usage = Mock()
    usage.prompt_tokens = 200
    usage.completion_tokens = 50
    usage.total_tokens = 250

    response = Mock()
    response.choices = [choice]
    response.usage = usage
    return response


class TestLLMResponse:
    """Test LLMResponse dataclass."""

    def test_payload_prefers_tool_result(self):
        response = LLMResponse(tool_result={"a": 1}, model="m", provider="p", raw_text="{}")
        assert response.payload() == {"a": 1}

    def test_payload_falls_back_to_raw_text(self):
        response = LLMResponse(tool_result=None, model="m", provider="p", raw_text='{"a": 1}')
        assert response.payload() == '{"a": 1}'

    def test_llm_response_minimal(self):
        response = LLMResponse(tool_result={}, model="gpt-4o", provider="openai")
        assert response.tokens_input is None
        assert response.latency_ms == 0


class TestModelStringParsing:
    """Test model string parsing utilities."""

    def test_parse_model_string_with_provider(self):
        assert parse_model_string("ollama/qwen2.5:7b") == ("ollama", "qwen2.5:7b")

    def test_parse_model_string_without_provider(self):
        assert parse_model_string("qwen2.5:7b") == (None, "qwen2.5:7b")

    def test_parse_model_string_multiple_slashes(self):
        """OpenRouter model ids contain a slash themselves."""
        provider, model = parse_model_string("openrouter/anthropic/claude-3-haiku")
        assert provider == "openrouter"
        assert model == "anthropic/claude-3-haiku"


class TestOllamaClient:
    """Test OllamaClient implementation."""

    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_client_initialization(self, mock_client_class):
        client = OllamaClient(model="qwen2.5:7b", base_url="http://localhost:11434", timeout_seconds=30)

        assert client.model == "qwen2.5:7b"
        assert client.model_string == "ollama/qwen2.5:7b"
        mock_client_class.assert_called_once_with(host="http://localhost:11434", timeout=30)

    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_tool_call_success(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {
            'message': {
                'content': '',
                'tool_calls': [{'function': {'name': 'extract_keywords', 'arguments': KEYWORDS_ARGS}}]
            },
            'prompt_eval_count': 150,
            'eval_count': 100,
            'done_reason': 'stop'
        }
        mock_client_class.return_value = mock_client

        client = OllamaClient(model="qwen2.5:7b")
        response = client.analyze("system", "user", [get_keyword_tool_definition()])

        assert response.provider == "ollama"
        assert response.tool_result == KEYWORDS_ARGS
        assert response.tokens_total == 250
        assert mock_client.chat.call_args.kwargs["tools"][0]["function"]["name"] == "extract_keywords"

    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_string_arguments_decoded(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {
            'message': {'tool_calls': [{'function': {'arguments': json.dumps(KEYWORDS_ARGS)}}]},
        }
        mock_client_class.return_value = mock_client

        response = OllamaClient(model="m").analyze("s", "u", [get_keyword_tool_definition()])
        assert response.tool_result == KEYWORDS_ARGS

    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_no_tool_call_returns_raw_text(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {
            'message': {'content': '{"mainTopics": []}', 'tool_calls': []}
        }
        mock_client_class.return_value = mock_client

        response = OllamaClient(model="m").analyze("s", "u", [get_keyword_tool_definition()])

        assert response.tool_result is None
        assert response.payload() == '{"mainTopics": []}'

    @patch('reading_recommender.extraction.llm_client.time.sleep')
    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_retry_logic(self, mock_client_class, mock_sleep):
        """Two failures then success: three calls, exponential waits."""
        mock_client = Mock()
        mock_client.chat.side_effect = [
            Exception("Connection error"),
            Exception("Timeout"),
            {'message': {'tool_calls': [{'function': {'arguments': KEYWORDS_ARGS}}]}},
        ]
        mock_client_class.return_value = mock_client

        client = OllamaClient(model="m", max_retries=3, retry_delay=0.5)
        response = client.analyze("s", "u", [get_keyword_tool_definition()])

        assert response.tool_result == KEYWORDS_ARGS
        assert mock_client.chat.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch('reading_recommender.extraction.llm_client.time.sleep')
    @patch('reading_recommender.extraction.llm_client.ollama.Client')
    def test_ollama_retries_exhausted_reraises(self, mock_client_class, mock_sleep):
        mock_client = Mock()
        mock_client.chat.side_effect = ConnectionError("down")
        mock_client_class.return_value = mock_client

        client = OllamaClient(model="m", max_retries=2, retry_delay=0.01)
        with pytest.raises(ConnectionError):
            client.analyze("s", "u", [get_keyword_tool_definition()])
        assert mock_client.chat.call_count == 2


class TestOpenAICompatibleClient:
    """Test OpenAICompatibleClient implementation."""

    @patch('reading_recommender.extraction.llm_client.OpenAI')
    def test_openai_client_initialization(self, mock_openai_class):
        client = OpenAICompatibleClient(
            model="gpt-4o-mini",
            api_key="sk-test123",
            provider_name="openai"
        )

        assert client.model_string == "openai/gpt-4o-mini"
        assert mock_openai_class.call_args.kwargs["max_retries"] == 0

    @patch('reading_recommender.extraction.llm_client.OpenAI')
    def test_openai_forced_tool_choice(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_openai_response(KEYWORDS_ARGS)
        mock_openai_class.return_value = mock_client

        client = OpenAICompatibleClient(model="gpt-4o-mini", api_key="sk-test123")
        response = client.analyze("s", "u", [get_keyword_tool_definition()])

        assert response.tool_result == KEYWORDS_ARGS
        assert response.tokens_total == 250
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "function", "function": {"name": "extract_keywords"}}

    @patch('reading_recommender.extraction.llm_client.OpenAI')
    def test_openai_no_tool_call_returns_raw_text(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = make_openai_response(content="plain answer")
        mock_openai_class.return_value = mock_client

        client = OpenAICompatibleClient(model="gpt-4o-mini", api_key="sk-test123")
        response = client.analyze("s", "u", [get_keyword_tool_definition()])

        assert response.tool_result is None
        assert response.raw_text == "plain answer"


class TestClientFactory:
    """Test LLM client factory functions."""

    @patch('reading_recommender.extraction.llm_client.OllamaClient')
    def test_create_llm_client_ollama(self, mock_ollama_class):
        create_llm_client(provider="ollama", model="qwen2.5:7b")
        assert mock_ollama_class.call_args.kwargs["model"] == "qwen2.5:7b"

    @patch('reading_recommender.extraction.llm_client.OpenAICompatibleClient')
    def test_create_llm_client_openrouter_base_url(self, mock_openai_class):
        create_llm_client(provider="openrouter", model="anthropic/claude-3-haiku", api_key="k")
        kwargs = mock_openai_class.call_args.kwargs
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["provider_name"] == "openrouter"

    def test_create_llm_client_missing_api_key(self):
        with pytest.raises(ValueError, match="API key required"):
            create_llm_client(provider="openai", model="gpt-4o", api_key="")

    def test_create_llm_client_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm_client(provider="nope", model="x")

    @patch('reading_recommender.extraction.llm_client.OpenAICompatibleClient')
    def test_create_from_model_string(self, mock_openai_class):
        create_llm_client_from_model_string("deepseek/deepseek-chat", api_key="k")
        assert mock_openai_class.call_args.kwargs["model"] == "deepseek-chat"
        assert mock_openai_class.call_args.kwargs["provider_name"] == "deepseek"
