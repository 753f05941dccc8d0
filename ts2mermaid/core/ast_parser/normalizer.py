"""Turns tree-sitter declaration nodes into TypeRecord building blocks.

Three concerns live here:

- display names (``Name~T U~`` for generic declarations)
- textual rendering of type expressions, escaped for Mermaid class members
- dependency collection, a visitor over TypeScript type-node variants

Dependencies are collected from the syntax tree, never from the rendered
text. Function types are not entered: references inside a function's
parameter or return types are not tracked.
"""

from typing import Iterator, List, Optional

import tree_sitter

from .models import GENERIC_DELIMITER

# Characters Mermaid treats as syntax inside a class block
_ESCAPED_CHARACTERS = "(){}<>"

_ESCAPE_TABLE = {ord(c): f"#{ord(c)};" for c in _ESCAPED_CHARACTERS}


def node_text(node: Optional[tree_sitter.Node], source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def escape_type_text(text: str) -> str:
    """Collapse newlines and escape ``( ) { } < >`` as ``#<code>;``.

    >>> escape_type_text("Array<{ id: string }>")
    'Array#60;#123; id: string #125;#62;'
    """
    return text.replace("\n", " ").translate(_ESCAPE_TABLE)


def render_type(node: Optional[tree_sitter.Node], source: bytes) -> str:
    """Render a type node as a single escaped line ("" when absent)."""
    return escape_type_text(node_text(node, source))


def unwrap_annotation(node: Optional[tree_sitter.Node]) -> Optional[tree_sitter.Node]:
    """Return the type inside a ``: T`` style annotation node."""
    if node is None:
        return None
    if node.type.endswith("annotation") and node.named_children:
        return node.named_children[0]
    return node


def generic_suffix(node: tree_sitter.Node, source: bytes) -> str:
    """``~T U~`` for a declaration with type parameters, "" otherwise."""
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return ""
    names = [
        node_text(p.child_by_field_name("name"), source)
        for p in params.named_children
        if p.type == "type_parameter"
    ]
    if not names:
        return ""
    return f"{GENERIC_DELIMITER}{' '.join(names)}{GENERIC_DELIMITER}"


def display_name(node: tree_sitter.Node, source: bytes) -> str:
    return node_text(node.child_by_field_name("name"), source) + generic_suffix(node, source)


def unique(items: List[str]) -> List[str]:
    """Drop duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(items))


# =========================================================================
# Dependency visitor
# =========================================================================

# Nodes declaring a type parameter: the declared name is not a reference
_DECLARES_NAME = frozenset({"type_parameter", "mapped_type_clause"})

# Expression paths that can follow ``typeof``
_QUERY_TARGETS = frozenset({"identifier", "nested_identifier", "member_expression"})


def dotted_name(node: tree_sitter.Node, source: bytes) -> str:
    return "".join(node_text(node, source).split())


def collect_dependencies(node: Optional[tree_sitter.Node], source: bytes) -> List[str]:
    """Names referenced by a type expression, deduplicated in walk order."""
    if node is None:
        return []
    return unique(list(_visit(node, source)))


def _visit(node: tree_sitter.Node, source: bytes) -> Iterator[str]:
    kind = node.type

    if kind == "function_type":
        return

    if kind == "type_identifier":
        yield node_text(node, source)
        return

    if kind == "nested_type_identifier":
        yield dotted_name(node, source)
        return

    if kind == "type_query":
        for child in node.named_children:
            if child.type in _QUERY_TARGETS:
                yield dotted_name(child, source)
            else:
                yield from _visit(child, source)
        return

    if kind == "infer_type":
        # infer U extends C: U is declared here, C is referenced
        declared = next((c for c in node.named_children if c.type == "type_identifier"), None)
        for child in node.named_children:
            if child != declared:
                yield from _visit(child, source)
        return

    if kind in _DECLARES_NAME:
        declared = node.child_by_field_name("name")
        for child in node.named_children:
            if child != declared:
                yield from _visit(child, source)
        return

    for child in node.named_children:
        yield from _visit(child, source)
