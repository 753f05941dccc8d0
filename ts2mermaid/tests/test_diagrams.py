"""Tests for edge resolution and Mermaid compilation."""

import copy

from ts2mermaid.core.ast_parser import TypeRecord, parse_source
from ts2mermaid.core.diagrams import compile_class_diagram, resolve_edges
from ts2mermaid.core.diagrams.graph import DEPENDENCY, EXTENDS, dependency_edges


# =========================================================================
# Sample TypeScript source fixtures
# =========================================================================

MUTUAL = '''
interface A { x: B }
interface B { y: A }
'''

ONE_WAY = '''
interface A { x: B }
interface B { y: string }
'''

UNRESOLVED = '''
interface A { x: External; y: Promise<Other> }
interface Child extends Missing {}
'''

INHERITANCE = '''
interface Base { id: string }
interface Derived extends Base { name: string }
'''

GENERIC_CYCLE = '''
interface Box<T> { item: Item }
interface Item { box: Box<Item> }
'''


def _types(source: str):
    return parse_source(source, "test.ts").types


def _arrow_lines(markup: str):
    return [line for line in markup.splitlines() if "<.." in line or "<|--" in line]


# =========================================================================
# Tests: Edge resolution
# =========================================================================

class TestResolveEdges:
    def test_mutual_pair_merged(self):
        types = _types(MUTUAL)
        edges = resolve_edges(types)
        assert len(edges) == 1
        assert edges[0].kind == DEPENDENCY
        assert edges[0].bidirectional
        assert {edges[0].source, edges[0].target} == {0, 1}

    def test_one_way(self):
        edges = resolve_edges(_types(ONE_WAY))
        assert len(edges) == 1
        assert (edges[0].source, edges[0].target) == (0, 1)
        assert not edges[0].bidirectional

    def test_unresolved_names_dropped(self):
        assert resolve_edges(_types(UNRESOLVED)) == []

    def test_records_not_mutated(self):
        types = _types(MUTUAL)
        before = copy.deepcopy(types)
        resolve_edges(types)
        assert types == before

    def test_order_independent(self):
        types = [
            TypeRecord(name="A", value={}, dependencies=["B", "C"]),
            TypeRecord(name="B", value={}, dependencies=["A"]),
            TypeRecord(name="C", value="string"),
        ]

        def edge_set(records):
            return {
                (frozenset((records[e.source].name, records[e.target].name)), e.bidirectional)
                for e in dependency_edges(records)
            }

        assert edge_set(types) == edge_set(list(reversed(types)))
        assert edge_set(types) == {
            (frozenset(("A", "B")), True),
            (frozenset(("A", "C")), False),
        }

    def test_self_reference_single_bidirectional_edge(self):
        edges = resolve_edges(_types("interface Node { next: Node }"))
        assert len(edges) == 1
        assert edges[0].source == edges[0].target == 0
        assert edges[0].bidirectional

    def test_generic_names_resolve_by_bare_name(self):
        types = _types(GENERIC_CYCLE)
        edges = dependency_edges(types)
        pairs = {(types[e.source].name, types[e.target].name, e.bidirectional) for e in edges}
        assert pairs == {("Box~T~", "Item", True), ("Item", "Item", True)}

    def test_first_declaration_wins(self):
        types = [
            TypeRecord(name="User", value={}, dependencies=["Id"]),
            TypeRecord(name="Id", value="string"),
            TypeRecord(name="Id", value="number"),
        ]
        edges = resolve_edges(types)
        assert [(e.source, e.target) for e in edges] == [(0, 1)]

    def test_extends_edge(self):
        edges = resolve_edges(_types(INHERITANCE))
        assert len(edges) == 1
        assert edges[0].kind == EXTENDS
        assert (edges[0].source, edges[0].target) == (1, 0)


# =========================================================================
# Tests: Mermaid markup
# =========================================================================

class TestCompileClassDiagram:
    def test_mutual_dependency_single_bidirectional_line(self):
        markup = compile_class_diagram(_types(MUTUAL))
        assert _arrow_lines(markup) == ["A <..< B"]

    def test_one_way_dependency(self):
        markup = compile_class_diagram(_types(ONE_WAY))
        assert _arrow_lines(markup) == ["A <.. B"]

    def test_unresolved_names_produce_no_arrows(self):
        markup = compile_class_diagram(_types(UNRESOLVED))
        assert _arrow_lines(markup) == []

    def test_inheritance_arrow(self):
        markup = compile_class_diagram(_types(INHERITANCE))
        assert _arrow_lines(markup) == ["Base <|-- Derived"]

    def test_self_reference_two_headed(self):
        markup = compile_class_diagram(_types("interface Node { next: Node }"))
        assert _arrow_lines(markup) == ["Node <..< Node"]

    def test_generic_cycle(self):
        markup = compile_class_diagram(_types(GENERIC_CYCLE))
        assert _arrow_lines(markup) == ["Box~T~ <..< Item", "Item <..< Item"]

    def test_class_blocks(self):
        markup = compile_class_diagram(_types("interface A { x: B; y?: Array<B> }\ntype B = string"))
        lines = markup.splitlines()
        assert lines[0] == "classDiagram"
        assert lines[1:6] == [
            "class A {",
            "  <<interface>>",
            "  x: B",
            "  y?: Array#60;B#62;",
            "}",
        ]
        block_start = lines.index("class B {")
        assert lines[block_start:block_start + 4] == [
            "class B {",
            "  <<type>>",
            "  string",
            "}",
        ]
        assert markup.endswith("\n")

    def test_arrows_follow_their_block(self):
        lines = compile_class_diagram(_types(ONE_WAY)).splitlines()
        assert lines.index("A <.. B") < lines.index("class B {")

    def test_hide_dependencies(self):
        markup = compile_class_diagram(_types(MUTUAL + INHERITANCE), hide_dependencies=True)
        assert _arrow_lines(markup) == ["Base <|-- Derived"]

    def test_hide_extends(self):
        markup = compile_class_diagram(_types(ONE_WAY), hide_extends=True)
        assert _arrow_lines(markup) == ["A <.. B"]
        markup = compile_class_diagram(_types(INHERITANCE), hide_extends=True)
        assert _arrow_lines(markup) == []

    def test_empty(self):
        assert compile_class_diagram([]) == "classDiagram\n"
