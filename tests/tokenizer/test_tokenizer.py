"""
Tests for token estimation and entry truncation.

Tests cover:
1. Character-ratio estimation
2. Entry rendering and cost
3. Head/tail truncation
4. tiktoken provider switch
"""

from unittest.mock import MagicMock

import pytest

from inkreflect.config import TokenizerConfig
from inkreflect.core.tokenizer import TRIM_MARKER, Tokenizer, estimate_tokens, render_entry
from inkreflect.models import JournalEntry


@pytest.mark.unit
class TestEstimateTokens:
    """Tests for the character-ratio estimate."""

    def test_empty_text(self):
        assert estimate_tokens("") == 0

    def test_rounds_up(self):
        assert estimate_tokens("abcdefg") == 2  # 7 / 3.6 = 1.94
        assert estimate_tokens("a") == 1

    def test_exact_multiple(self):
        assert estimate_tokens("x" * 36) == 10

    def test_custom_ratio(self):
        assert estimate_tokens("x" * 10, chars_per_token=4.0) == 3

    def test_deterministic(self):
        text = "The quick brown fox jumps over the lazy dog."
        assert estimate_tokens(text) == estimate_tokens(text)


@pytest.mark.unit
class TestEntryRendering:
    """Tests for entry text and entry cost."""

    def test_render_with_title(self):
        entry = JournalEntry(title="Monday", content="Long walk by the river.")
        assert render_entry(entry) == "Monday: Long walk by the river."

    def test_render_without_title(self):
        entry = JournalEntry(content="Long walk by the river.")
        assert render_entry(entry) == "Long walk by the river."

    def test_entry_tokens_counts_title_and_content(self):
        tokenizer = Tokenizer()
        entry = JournalEntry(title="x" * 18, content="y" * 18)
        assert tokenizer.entry_tokens(entry) == 10

    def test_count_tokens_empty(self):
        assert Tokenizer().count_tokens("") == 0


@pytest.mark.unit
class TestTruncation:
    """Tests for head/tail truncation."""

    def test_short_entry_unchanged(self):
        tokenizer = Tokenizer()
        entry = JournalEntry(title="Short", content="Nothing much happened.")
        assert tokenizer.truncate_entry(entry, max_tokens=400) == "Short: Nothing much happened."

    def test_long_entry_trimmed_in_middle(self):
        tokenizer = Tokenizer()
        content = "a" * 1000 + "b" * 1000 + "c" * 1000
        entry = JournalEntry(title="T", content=content)

        text = tokenizer.truncate_entry(entry, max_tokens=400)

        # 400 tokens -> 1200 chars: 840 head, 340 tail
        head, tail = text.split(TRIM_MARKER)
        assert len(head) == 840
        assert len(tail) == 340
        assert head.startswith("T: aaa")
        assert tail == "c" * 340
        assert len(text) == 840 + len(TRIM_MARKER) + 340

    def test_entry_not_mutated(self):
        tokenizer = Tokenizer()
        entry = JournalEntry(title="T", content="z" * 5000)

        tokenizer.truncate_entry(entry, max_tokens=100)

        assert entry.content == "z" * 5000

    def test_tiny_cap_has_no_tail(self):
        tokenizer = Tokenizer()
        entry = JournalEntry(content="q" * 200)

        text = tokenizer.truncate_entry(entry, max_tokens=5)

        # 5 tokens -> 15 chars: 10 head, tail reserve swallows the rest
        assert text == "q" * 10 + TRIM_MARKER


@pytest.mark.unit
class TestTiktokenProvider:
    """Tests for switching to exact counts."""

    def test_uses_encoder_when_configured(self):
        tokenizer = Tokenizer(TokenizerConfig(provider="tiktoken"))
        tokenizer._encoder = MagicMock()
        tokenizer._encoder.encode.return_value = [1, 2, 3]

        assert tokenizer.count_tokens("hello world") == 3
        tokenizer._encoder.encode.assert_called_once_with("hello world")

    def test_approximate_does_not_touch_encoder(self):
        tokenizer = Tokenizer(TokenizerConfig(provider="approximate"))
        tokenizer._encoder = MagicMock()

        assert tokenizer.count_tokens("x" * 36) == 10
        tokenizer._encoder.encode.assert_not_called()
