"""DOT text surface: colors, serializer, grammar adapter and reducer."""

from .colors import hsl_to_hex, normalize_color_to_hex, string_to_color
from .grammar import parse, validate_dot
from .reducer import dot_ast_to_graph
from .serializer import to_dot

__all__ = [
    "hsl_to_hex",
    "normalize_color_to_hex",
    "string_to_color",
    "parse",
    "validate_dot",
    "dot_ast_to_graph",
    "to_dot",
]
