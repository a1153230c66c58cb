"""
Tests for component factories.
"""

import pytest

from inkreflect.config import CacheConfig, LLMConfig
from inkreflect.core.factory import KeyValueStoreFactory, LLMFactory
from inkreflect.core.kv_store import InMemoryKeyValueStore, SQLiteKeyValueStore
from inkreflect.core.llm import OllamaTextGenerator, OpenAITextGenerator
from inkreflect.utils.exceptions import ConfigurationError


@pytest.mark.unit
class TestLLMFactory:
    """Test text generation provider creation."""

    def test_create_ollama_default_host(self):
        generator = LLMFactory.create(LLMConfig(provider="ollama", model="mistral"))

        assert isinstance(generator, OllamaTextGenerator)
        assert generator.host == "http://localhost:11434"
        assert generator.model == "mistral"

    def test_create_ollama_custom_host(self):
        generator = LLMFactory.create(
            LLMConfig(provider="ollama", base_url="http://ollama.internal:11434")
        )
        assert generator.host == "http://ollama.internal:11434"

    def test_create_openai(self):
        generator = LLMFactory.create(
            LLMConfig(provider="openai", model="gpt-4o-mini", api_key="sk-test")
        )

        assert isinstance(generator, OpenAITextGenerator)
        assert generator.model == "gpt-4o-mini"

    def test_openai_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            LLMFactory.create(LLMConfig(provider="openai"))

    def test_unsupported_provider(self):
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            LLMFactory.create(LLMConfig(provider="carrier-pigeon"))


@pytest.mark.unit
class TestKeyValueStoreFactory:
    """Test cache store creation."""

    def test_create_memory(self):
        assert isinstance(KeyValueStoreFactory.create(CacheConfig(backend="memory")), InMemoryKeyValueStore)

    def test_create_sqlite(self, tmp_path):
        db_path = str(tmp_path / "cache.db")
        store = KeyValueStoreFactory.create(CacheConfig(backend="sqlite", db_path=db_path))

        assert isinstance(store, SQLiteKeyValueStore)
        assert store.db_path == db_path

    def test_unsupported_backend(self):
        with pytest.raises(ConfigurationError):
            KeyValueStoreFactory.create(CacheConfig(backend="redis"))
