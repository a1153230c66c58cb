"""
Ollama text generation provider using native ollama-python SDK.
"""

import json

import ollama
from pydantic import BaseModel

from inkreflect.core.llm.base import TextGenerationService
from inkreflect.utils.exceptions import LLMError
from inkreflect.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaTextGenerator(TextGenerationService):
    """
    Ollama text generation provider.

    Uses JSON mode for structured outputs and shows the model an example
    object built from the response schema.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

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
        Generate text using Ollama chat.

        Raises:
            LLMError: If the request fails or returns no content
        """
        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
        }

        content = prompt
        format_type = None
        if response_format:
            format_type = "json"
            content = self._with_json_example(prompt, response_format)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": content})

        try:
            response = await self.client.chat(
                model=self.model,
                messages=messages,
                format=format_type,
                options=options,
            )
        except Exception as e:
            logger.error(f"Ollama request failed ({operation}): {e}")
            raise LLMError(
                f"Ollama request failed: {e}", context={"model": self.model, "operation": operation}
            ) from e

        text = response["message"]["content"]
        if not text:
            raise LLMError("Ollama returned empty content", context={"operation": operation})

        return text

    def _with_json_example(self, prompt: str, response_format: type[BaseModel]) -> str:
        """
        Append an example JSON object derived from the response schema.

        Args:
            prompt: Original prompt
            response_format: Expected response model

        Returns:
            Prompt with JSON instructions
        """
        properties = response_format.model_json_schema().get("properties", {})

        example = {}
        for field_name, field_info in properties.items():
            field_type = field_info.get("type", "string")
            if field_type == "array":
                example[field_name] = [f"<{field_name} item>"]
            elif field_type in ("number", "integer"):
                example[field_name] = 1
            elif field_type == "boolean":
                example[field_name] = True
            else:
                example[field_name] = f"<{field_name}>"

        example_str = json.dumps(example, indent=2)

        return f"""{prompt}

You MUST respond with valid JSON matching this structure:
{example_str}

IMPORTANT:
- Replace placeholder values like "<field_name>" with actual content
- Return ONLY valid JSON, no markdown formatting or extra text"""
