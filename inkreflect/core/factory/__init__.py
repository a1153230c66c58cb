"""
Factory modules for creating InkReflect components.
"""

from inkreflect.core.factory.llm_factory import LLMFactory
from inkreflect.core.factory.store_factory import KeyValueStoreFactory

__all__ = [
    "LLMFactory",
    "KeyValueStoreFactory",
]
