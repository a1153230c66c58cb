"""
Decoding of generation output into typed response shapes.
"""

from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from inkreflect.utils.exceptions import InvalidResponseError

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def extract_json(content: str) -> str:
    """
    Extract JSON from content that might have markdown formatting.

    Args:
        content: Raw content that may contain JSON

    Returns:
        Cleaned JSON string
    """
    content = content.strip()

    if "```json" in content:
        content = content.split("```json")[1].split("```")[0].strip()
    elif "```" in content:
        content = content.split("```")[1].split("```")[0].strip()

    return content


def decode_response(content: str | None, response_format: type[ResponseT]) -> ResponseT:
    """
    Decode generated text into ``response_format``.

    Raises:
        InvalidResponseError: If content is empty or does not match the shape
    """
    if content is None or not content.strip():
        raise InvalidResponseError(expected=response_format.__name__, detail="empty content")

    try:
        return response_format.model_validate_json(extract_json(content))
    except PydanticValidationError as e:
        raise InvalidResponseError(
            expected=response_format.__name__,
            detail=f"{e.error_count()} validation error(s); raw: {content[:200]}",
        ) from e
