"""Core building blocks: text generation, tokenization, prompts and storage."""
