"""
Text generation abstraction layer.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""

from inkreflect.core.llm.base import TextGenerationService
from inkreflect.core.llm.decoding import decode_response, extract_json
from inkreflect.core.llm.ollama import OllamaTextGenerator
from inkreflect.core.llm.openai import OpenAITextGenerator

__all__ = [
    "TextGenerationService",
    "OllamaTextGenerator",
    "OpenAITextGenerator",
    "decode_response",
    "extract_json",
]
