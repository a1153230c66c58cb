"""
Tests for Ollama text generation provider.
"""
from unittest.mock import AsyncMock, patch

import pytest

from inkreflect.core.llm.ollama import OllamaTextGenerator
from inkreflect.models import ReflectionResponse
from inkreflect.utils.exceptions import LLMError


@pytest.fixture
def ollama_generator():
    """Create Ollama generator for testing."""
    return OllamaTextGenerator(host="http://localhost:11434", model="llama3.1:8b", timeout=120.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaTextGenerator:
    """Test Ollama provider."""

    async def test_initialization(self, ollama_generator):
        assert ollama_generator.host == "http://localhost:11434"
        assert ollama_generator.model == "llama3.1:8b"
        assert ollama_generator.client is not None

    async def test_generate_plain(self, ollama_generator):
        with patch.object(ollama_generator.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "hi there"}}

            result = await ollama_generator.generate(
                "hello", system_prompt="Be brief.", temperature=0.2, max_tokens=64
            )

            assert result == "hi there"
            kwargs = mock_chat.call_args.kwargs
            assert kwargs["model"] == "llama3.1:8b"
            assert kwargs["format"] is None
            assert kwargs["options"] == {"temperature": 0.2, "num_predict": 64}
            assert kwargs["messages"] == [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "hello"},
            ]

    async def test_generate_json(self, ollama_generator):
        with patch.object(ollama_generator.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": "{}"}}

            await ollama_generator.generate("reflect", response_format=ReflectionResponse)

            kwargs = mock_chat.call_args.kwargs
            assert kwargs["format"] == "json"
            prompt = kwargs["messages"][-1]["content"]
            assert prompt.startswith("reflect")
            assert '"key_insight": "<key_insight>"' in prompt
            assert '"themes": [' in prompt

    async def test_request_error_wrapped(self, ollama_generator):
        with patch.object(ollama_generator.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.side_effect = ConnectionError("connection refused")

            with pytest.raises(LLMError) as exc_info:
                await ollama_generator.generate("hello")

            assert exc_info.value.context["model"] == "llama3.1:8b"

    async def test_empty_content(self, ollama_generator):
        with patch.object(ollama_generator.client, "chat", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = {"message": {"content": ""}}

            with pytest.raises(LLMError):
                await ollama_generator.generate("hello")
