import pytest

from polycule.dot.ast import EdgeStmt, NodeStmt, Subgraph, unquote
from polycule.dot.grammar import KEYWORD_ERROR, check_keyword, node_name, parse, validate_dot
from polycule.errors import DotSyntaxError


def test_keyword_check_rejects_other_text() -> None:
    with pytest.raises(DotSyntaxError, match="must start with"):
        check_keyword("hello { A }")
    with pytest.raises(DotSyntaxError) as exc_info:
        validate_dot("")
    assert str(exc_info.value) == KEYWORD_ERROR


@pytest.mark.parametrize("text", ["graph {}", "  digraph G { A -> B }", "GRAPH x { A }"])
def test_keyword_check_accepts_graph_and_digraph(text: str) -> None:
    check_keyword(text)


def test_grammar_error_is_dot_syntax_error() -> None:
    with pytest.raises(DotSyntaxError):
        validate_dot("graph { A -- }")


def test_syntax_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        validate_dot("graph { [ }")


def test_parse_keeps_statement_order() -> None:
    (graph,) = parse('graph G { B; A -- B; A [label="x"]; }')
    assert graph.id == "G"
    assert not graph.directed
    kinds = [type(child) for child in graph.children]
    assert kinds == [NodeStmt, EdgeStmt, NodeStmt]
    assert graph.children[1].edge_list == ("A", "B")


def test_parse_digraph_and_subgraph() -> None:
    (graph,) = parse("digraph { subgraph inner { A; } A -> B; }")
    assert graph.directed
    assert isinstance(graph.children[0], Subgraph)
    edge = graph.children[1]
    assert isinstance(edge, EdgeStmt)
    assert edge.op == "->"


def test_default_attribute_statements_are_not_nodes() -> None:
    (graph,) = parse("graph { node [color=red]; A; }")
    names = [child.node_id for child in graph.children if isinstance(child, NodeStmt)]
    assert names == ["A"]


def test_unquote() -> None:
    assert unquote('"Alice"') == "Alice"
    assert unquote('"say \\"hi\\""') == 'say "hi"'
    assert unquote("plain") == "plain"
    assert unquote(None) == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("A", "A"), ("A:p", "A"), ("A:p:n", "A"), ('"A:b"', "A:b"), ('"A:b":p', "A:b"), ('"say \\"hi\\"":p', 'say "hi"')],
)
def test_node_name_drops_ports(raw: str, expected: str) -> None:
    assert node_name(raw) == expected
