"""Token codec and URL fragment / storage persistence."""

from .codec import decode_graph, encode_graph
from .sync import FileStorage, LoadResult, LocationFragment, MemoryStorage, PersistenceSync

__all__ = [
    "decode_graph",
    "encode_graph",
    "FileStorage",
    "LoadResult",
    "LocationFragment",
    "MemoryStorage",
    "PersistenceSync",
]
