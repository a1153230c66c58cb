"""
Factory for creating text generation providers.
"""

from inkreflect.config import LLMConfig
from inkreflect.core.llm.base import TextGenerationService
from inkreflect.core.llm.ollama import OllamaTextGenerator
from inkreflect.core.llm.openai import OpenAITextGenerator
from inkreflect.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating text generation providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> TextGenerationService:
        """
        Create text generation provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            Text generation service instance

        Raises:
            ConfigurationError: If provider is not supported or misconfigured
        """
        if config.provider == "ollama":
            return OllamaTextGenerator(
                host=config.base_url or "http://localhost:11434",
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAITextGenerator(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
