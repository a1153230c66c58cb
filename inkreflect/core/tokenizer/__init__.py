"""
Token estimation for chunk budgeting and per-entry truncation.
"""

from inkreflect.config import TokenizerConfig
from inkreflect.core.tokenizer.tokenizer import (
    TRIM_MARKER,
    Tokenizer,
    estimate_tokens,
    render_entry,
)

__all__ = ["Tokenizer", "TokenizerConfig", "estimate_tokens", "render_entry", "TRIM_MARKER"]
