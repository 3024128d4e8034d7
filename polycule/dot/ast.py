"""Minimal DOT abstract syntax consumed by the reducer.

Only the statement kinds the reducer understands are represented. Attribute
values are kept exactly as the grammar saw them, quotes included.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class DotAttr:
    id: str
    value: str


@dataclass(frozen=True)
class NodeStmt:
    node_id: str
    attrs: tuple[DotAttr, ...] = ()


@dataclass(frozen=True)
class EdgeStmt:
    edge_list: tuple[str, ...]  # A -- B -- C is one statement with three ids
    attrs: tuple[DotAttr, ...] = ()
    op: str = "--"


@dataclass(frozen=True)
class Subgraph:
    id: str | None = None
    children: tuple["Statement", ...] = ()


Statement = Union[NodeStmt, EdgeStmt, Subgraph]


@dataclass(frozen=True)
class DotGraph:
    id: str | None = None
    directed: bool = False
    strict: bool = False
    children: tuple[Statement, ...] = field(default_factory=tuple)


def unquote(value: str | None) -> str:
    """Strip one pair of matching outer quotes and undo backslash escapes."""
    text = "" if value is None else str(value)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return _unescape(text[1:-1], text[0])
    return text


def _unescape(body: str, quote: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body) and body[i + 1] in (quote, "\\"):
            out.append(body[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
