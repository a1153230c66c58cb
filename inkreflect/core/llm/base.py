"""
Abstract base class for text generation services.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class TextGenerationService(ABC):
    """
    Abstract base for text generation providers.

    The reflection pipeline only needs raw text back; decoding into the
    expected response shape happens at each call site.
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        operation: str = "generate",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        response_format: type[BaseModel] | None = None,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: User prompt content
            system_prompt: Optional system instructions
            operation: Operation tag used for logging and quota accounting
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            response_format: Optional Pydantic model describing the JSON the
                caller expects; providers use it to request JSON output

        Returns:
            Generated text (JSON text when response_format is provided)

        Raises:
            LLMError: If the provider call fails
        """

    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """
