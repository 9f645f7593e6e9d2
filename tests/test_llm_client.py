"""
Tests for the OpenRouter chat-completion client
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
from openai import OpenAIError

from src.services.llm_client import LLMClient, LLMError, extract_json_object


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestExtractJsonObject:

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert extract_json_object('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}

    def test_json_embedded_in_prose(self):
        text = 'Here is the analysis:\n{"difficulty": "easy"}\nGood luck!'
        assert extract_json_object(text) == {"difficulty": "easy"}

    def test_no_json_raises(self):
        with pytest.raises(ValueError, match="No JSON"):
            extract_json_object("I could not analyze this issue.")

    def test_broken_json_raises(self):
        with pytest.raises(ValueError, match="Invalid JSON"):
            extract_json_object("result: {not json}")

    def test_non_object_raises(self):
        with pytest.raises(ValueError):
            extract_json_object("[1, 2, 3]")


class TestLLMClient:

    @pytest.fixture
    def openai_client(self):
        client = Mock()
        client.chat.completions.create = AsyncMock(return_value=_response("  - A summary line  "))
        return client

    @pytest.fixture
    def llm(self, openai_client):
        return LLMClient(api_key="test-key", model="openai/gpt-4o", client=openai_client)

    @pytest.mark.asyncio
    async def test_complete_returns_stripped_reply(self, llm, openai_client):
        reply = await llm.complete("system", "user prompt", max_tokens=300)

        assert reply == "- A summary line"
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o"
        assert kwargs["max_tokens"] == 300
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user prompt"},
        ]

    @pytest.mark.asyncio
    async def test_api_error_becomes_llm_error(self, llm, openai_client):
        openai_client.chat.completions.create.side_effect = OpenAIError("upstream 502")

        with pytest.raises(LLMError, match="OpenRouter API failed"):
            await llm.complete("system", "user")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        _response(""),
        _response(None),
        SimpleNamespace(choices=[]),
    ])
    async def test_empty_reply_raises(self, llm, openai_client, response):
        openai_client.chat.completions.create.return_value = response

        with pytest.raises(LLMError, match="Invalid OpenRouter response format"):
            await llm.complete("system", "user")

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        llm = LLMClient(api_key="")

        assert not llm.configured
        with pytest.raises(LLMError, match="not configured"):
            await llm.complete("system", "user")

    def test_client_is_built_for_openrouter(self):
        with patch("src.services.llm_client.AsyncOpenAI") as mock_openai:
            llm = LLMClient(api_key="test-key", base_url="https://openrouter.example/api/v1")
            assert llm.client is mock_openai.return_value
            assert llm.client is mock_openai.return_value

        mock_openai.assert_called_once()
        kwargs = mock_openai.call_args.kwargs
        assert kwargs["api_key"] == "test-key"
        assert kwargs["base_url"] == "https://openrouter.example/api/v1"
        assert kwargs["max_retries"] == 0
        assert set(kwargs["default_headers"]) == {"HTTP-Referer", "X-Title"}
