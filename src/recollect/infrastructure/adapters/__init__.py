from .json_store import CollectionSnapshot, JsonCollection, load_snapshot
from .memory_store import InMemoryCollection

__all__ = ["InMemoryCollection", "JsonCollection", "CollectionSnapshot", "load_snapshot"]
