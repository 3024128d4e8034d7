"""polycule - relationship graph editor core with a DOT text surface."""

__version__ = "0.1.0"
