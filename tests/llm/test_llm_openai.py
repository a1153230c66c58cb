"""
Tests for OpenAI text generation provider.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from inkreflect.core.llm.openai import OpenAITextGenerator
from inkreflect.models import ChunkSummaryResponse
from inkreflect.utils.exceptions import LLMError, ValidationError


@pytest.fixture
def openai_generator():
    """Create OpenAI generator for testing."""
    return OpenAITextGenerator(api_key="test-key", model="gpt-4o-mini", timeout=120.0)


def completion(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.mark.unit
@pytest.mark.asyncio
class TestOpenAITextGenerator:
    """Test OpenAI provider."""

    async def test_initialization(self, openai_generator):
        assert openai_generator.model == "gpt-4o-mini"
        assert openai_generator.client is not None

    async def test_initialization_with_base_url(self):
        generator = OpenAITextGenerator(api_key="test-key", base_url="https://custom.openai.com/v1")
        assert str(generator.client.base_url).startswith("https://custom.openai.com/v1")

    async def test_generate_plain(self, openai_generator):
        with patch.object(
            openai_generator.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = completion("plain text")

            result = await openai_generator.generate("hello", temperature=0.3, max_tokens=100)

            assert result == "plain text"
            kwargs = mock_create.call_args.kwargs
            assert kwargs["model"] == "gpt-4o-mini"
            assert kwargs["temperature"] == 0.3
            assert kwargs["max_tokens"] == 100
            assert kwargs["messages"] == [{"role": "user", "content": "hello"}]
            assert "response_format" not in kwargs

    async def test_generate_json_mode(self, openai_generator):
        with patch.object(
            openai_generator.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = completion('{"summary": "s"}')

            await openai_generator.generate(
                "summarize", system_prompt="Be kind.", response_format=ChunkSummaryResponse
            )

            kwargs = mock_create.call_args.kwargs
            assert kwargs["response_format"] == {"type": "json_object"}
            system = kwargs["messages"][0]
            assert system["role"] == "system"
            assert system["content"].startswith("Be kind.")
            assert "emotional_tone" in system["content"]

    async def test_empty_prompt(self, openai_generator):
        with pytest.raises(ValidationError):
            await openai_generator.generate("   ")

    async def test_api_error_wrapped(self, openai_generator):
        with patch.object(
            openai_generator.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = RuntimeError("rate limited {retry}")

            with pytest.raises(LLMError) as exc_info:
                await openai_generator.generate("hello", operation="weekly_monthly_summary")

            assert exc_info.value.context["operation"] == "weekly_monthly_summary"
            assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_empty_content(self, openai_generator):
        with patch.object(
            openai_generator.client.chat.completions, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.return_value = completion(None)

            with pytest.raises(LLMError):
                await openai_generator.generate("hello")

    async def test_close(self, openai_generator):
        with patch.object(openai_generator.client, "close", new_callable=AsyncMock) as mock_close:
            await openai_generator.close()
            mock_close.assert_called_once()
