"""Local persistence for the order desk."""

from .local_cache import LocalOrderCache
from .medium import InMemoryMedium, JsonFileMedium, KeyValueMedium

__all__ = ["InMemoryMedium", "JsonFileMedium", "KeyValueMedium", "LocalOrderCache"]
