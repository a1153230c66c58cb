"""
OpenAI text generation provider using official SDK.
"""

import json

from openai import AsyncOpenAI
from pydantic import BaseModel

from inkreflect.core.llm.base import TextGenerationService
from inkreflect.utils.exceptions import LLMError, ValidationError
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAITextGenerator(TextGenerationService):
    """
    OpenAI text generation provider.

    Uses JSON mode when a response format is requested and appends the
    expected JSON schema to the system prompt.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

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
        Generate text using OpenAI chat completions.

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the API call fails or returns no content
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        system_content = system_prompt or ""
        if response_format:
            schema = json.dumps(response_format.model_json_schema())
            system_content = (
                f"{system_content}\n\nRespond only with a JSON object matching this schema:\n{schema}"
            ).strip()

        messages = []
        if system_content:
            messages.append({"role": "system", "content": system_content})
        messages.append({"role": "user", "content": prompt})

        params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.bind(model=self.model, operation=operation, error_type=type(e).__name__).error(
                f"OpenAI API error: {e}"
            )
            raise LLMError(
                f"OpenAI API error: {e}", context={"model": self.model, "operation": operation}
            ) from e

        content = response.choices[0].message.content
        if not content:
            raise LLMError("OpenAI returned empty content", context={"operation": operation})

        return content

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
