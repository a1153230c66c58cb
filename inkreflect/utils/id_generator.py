"""
ID generation utilities for InkReflect.

- Entries: entry_xxx
- Chunks: chunk_xxx
- Reflections: refl_xxx
"""

from uuid import uuid4


def generate_entry_id() -> str:
    """
    Generate unique journal entry ID.

    Returns:
        ID in format "entry_xxx" where xxx is 12 hex characters
    """
    return f"entry_{uuid4().hex[:12]}"


def generate_chunk_id() -> str:
    """
    Generate unique reflection chunk ID.

    Returns:
        ID in format "chunk_xxx" where xxx is 12 hex characters
    """
    return f"chunk_{uuid4().hex[:12]}"


def generate_reflection_id() -> str:
    """
    Generate unique mood reflection ID.

    Returns:
        ID in format "refl_xxx" where xxx is 12 hex characters
    """
    return f"refl_{uuid4().hex[:12]}"
