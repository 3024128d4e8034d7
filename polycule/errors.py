"""Exception types raised by the graph core."""


class PolyculeError(Exception):
    """Base class for polycule errors."""


class DotSyntaxError(PolyculeError, ValueError):
    """DOT text was rejected by the keyword check or the grammar parser."""


class GraphEditError(PolyculeError, ValueError):
    """A direct-manipulation operation was rejected."""
