"""
InkReflect - mood reflection generation for journaling apps.

Turns a window of journal entries tagged with one mood into a synthesized
reflection (summary, key insight, themes, emotional arc) using chunked LLM
calls fronted by a two-tier expiring cache.
"""

__version__ = "1.0.0"
