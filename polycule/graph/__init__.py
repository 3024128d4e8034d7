"""Graph model operations, the state owner and renderer-facing helpers."""

from .elements import layout_mode, to_elements
from .focus import focus_subgraph
from .intents import dispatch
from .store import GraphStore, Selection

__all__ = [
    "layout_mode",
    "to_elements",
    "focus_subgraph",
    "dispatch",
    "GraphStore",
    "Selection",
]
