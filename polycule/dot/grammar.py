"""DOT grammar parsing backed by pydot.

pydot does the syntactic work; this module converts its graph objects into
the small AST in `polycule.dot.ast`, keeping statement order, and turns every
parser failure into `DotSyntaxError`.
"""

from __future__ import annotations

import contextlib
import io
import logging
import re
from typing import Any

import pydot

from ..errors import DotSyntaxError
from .ast import DotAttr, DotGraph, EdgeStmt, NodeStmt, Statement, Subgraph, unquote

logger = logging.getLogger(__name__)

KEYWORD_PATTERN = re.compile(r"^\s*(di)?graph\b", re.IGNORECASE)
KEYWORD_ERROR = 'DOT must start with "graph" or "digraph"'
GENERIC_ERROR = "Invalid DOT"

# pydot reports default attribute statements (`node [..]`) as nodes with these names
_DEFAULT_STATEMENTS = {"node", "edge", "graph"}


def check_keyword(text: str) -> None:
    """Reject text that does not open with `graph` or `digraph`."""
    if not isinstance(text, str) or not KEYWORD_PATTERN.match(text):
        raise DotSyntaxError(KEYWORD_ERROR)


def parse(text: str) -> list[DotGraph]:
    """Parse DOT text into graphs.

    Raises:
        DotSyntaxError: with the parser's message when the text is invalid.
    """
    captured = io.StringIO()
    try:
        # older pydot releases print the pyparsing error and return None
        with contextlib.redirect_stdout(captured):
            graphs = pydot.graph_from_dot_data(text)
    except Exception as exc:  # pydot/pyparsing raise a variety of types
        raise DotSyntaxError(str(exc).strip() or GENERIC_ERROR) from exc

    if not graphs:
        raise DotSyntaxError(_last_line(captured.getvalue()) or GENERIC_ERROR)

    try:
        return [_convert_graph(g) for g in graphs]
    except (KeyError, TypeError, AttributeError, IndexError) as exc:
        logger.debug("Could not convert pydot graph: %s", exc)
        raise DotSyntaxError(GENERIC_ERROR) from exc


def validate_dot(text: str) -> list[DotGraph]:
    """Keyword check followed by a full grammar parse."""
    check_keyword(text)
    return parse(text)


def _last_line(output: str) -> str:
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    return lines[-1] if lines else ""


def _convert_graph(graph: Any) -> DotGraph:
    directed = str(graph.get_type()).lower() == "digraph"
    name = graph.get_name()
    return DotGraph(
        id=unquote(name) if name else None,
        directed=directed,
        strict=bool(graph.obj_dict.get("strict", False)),
        children=tuple(_children(graph, "->" if directed else "--")),
    )


def _children(graph: Any, op: str) -> list[Statement]:
    entries: list[tuple[int, Statement]] = []

    for node in graph.get_nodes():
        name = node.get_name()
        if name in _DEFAULT_STATEMENTS:
            continue
        entries.append((_sequence(node), NodeStmt(node_id=unquote(name), attrs=_attrs(node))))

    declared: list[Subgraph] = []  # a chain repeats its middle subgraph endpoint
    for edge in graph.get_edges():
        seq = _sequence(edge)
        sources, source_sub = _endpoint(edge.get_source(), op)
        targets, target_sub = _endpoint(edge.get_destination(), op)
        # `A -- {B C}` declares the subgraph members, then links every pair
        for sub in (source_sub, target_sub):
            if sub is not None and sub not in declared:
                declared.append(sub)
                entries.append((seq, sub))
        attrs = _attrs(edge)
        for source in sources:
            for target in targets:
                entries.append((seq, EdgeStmt(edge_list=(source, target), attrs=attrs, op=op)))

    for sub in graph.get_subgraphs():
        name = sub.get_name()
        stmt = Subgraph(id=unquote(name) if name else None, children=tuple(_children(sub, op)))
        entries.append((_sequence(sub), stmt))

    entries.sort(key=lambda item: item[0])
    return [stmt for _, stmt in entries]


def _sequence(obj: Any) -> int:
    seq = obj.obj_dict.get("sequence")
    return seq if isinstance(seq, int) else 0


def _attrs(obj: Any) -> tuple[DotAttr, ...]:
    return tuple(
        DotAttr(id=str(key), value=str(value))
        for key, value in obj.get_attributes().items()
        if value is not None
    )


def node_name(raw: str) -> str:
    """Endpoint id without a `:port` or `:port:compass` suffix."""
    text = raw.strip()
    if text.startswith('"'):
        i = 1
        while i < len(text):
            if text[i] == "\\":
                i += 2
                continue
            if text[i] == '"':
                return unquote(text[: i + 1])
            i += 1
        return unquote(text)
    return text.split(":", 1)[0]


def _member_ids(children: tuple[Statement, ...]) -> list[str]:
    ids: dict[str, None] = {}
    for child in children:
        if isinstance(child, NodeStmt):
            ids.setdefault(child.node_id)
        elif isinstance(child, EdgeStmt):
            for node_id in child.edge_list:
                ids.setdefault(node_id)
        elif isinstance(child, Subgraph):
            for node_id in _member_ids(child.children):
                ids.setdefault(node_id)
    return list(ids)


def _endpoint(value: Any, op: str) -> tuple[list[str], Subgraph | None]:
    """Node ids an edge endpoint stands for, plus the subgraph it declares (if any)."""
    if isinstance(value, str):
        return [node_name(value)], None

    # pydot keeps a subgraph endpoint as the subgraph itself or its obj_dict
    if isinstance(value, pydot.Graph):
        sub = value
    elif isinstance(value, dict):
        sub = pydot.Subgraph(obj_dict=value)
    else:
        raise DotSyntaxError(f"Unsupported edge endpoint: {value!r}")

    name = sub.get_name()
    stmt = Subgraph(id=unquote(name) if name else None, children=tuple(_children(sub, op)))
    members = _member_ids(stmt.children)
    if not members:
        raise DotSyntaxError("Edge endpoint subgraph has no nodes")
    return members, stmt
