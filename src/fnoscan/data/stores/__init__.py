"""Storage backends for scanner state."""

from .base import KeyValueStore, MemoryKeyValueStore
from .local import JsonFileKeyValueStore

__all__ = ["JsonFileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]
