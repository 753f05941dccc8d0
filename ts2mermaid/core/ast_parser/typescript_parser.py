"""TypeScript declaration parser using tree-sitter.

Extracts top-level interface and type alias declarations (including
exported and ambient ones) and normalizes them into TypeRecords.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter
import tree_sitter_typescript

from .base import BaseDeclarationParser
from .models import TypeRecord
from .normalizer import (
    collect_dependencies,
    display_name,
    dotted_name,
    escape_type_text,
    node_text,
    render_type,
    unique,
    unwrap_annotation,
)

logger = logging.getLogger(__name__)

_TS_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_typescript())
_TSX_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_tsx())

INTERFACE = "interface_declaration"
TYPE_ALIAS = "type_alias_declaration"

_DECLARATIONS = frozenset({INTERFACE, TYPE_ALIAS})

# `export ...` and `declare ...` wrap a declaration without nesting scope
_WRAPPERS = frozenset({"export_statement", "ambient_declaration"})


class TypeScriptParser(BaseDeclarationParser):
    """tree-sitter based TypeScript declaration parser.

    - interface_declaration -> TypeRecord with a member mapping
    - type_alias_declaration -> TypeRecord with a single type text
    """

    def get_language(self) -> str:
        return "typescript"

    def get_tree_sitter_language(self, file_path: str) -> tree_sitter.Language:
        if file_path.lower().endswith(".tsx"):
            return _TSX_LANGUAGE
        return _TS_LANGUAGE

    def iter_declarations(
        self, tree: tree_sitter.Tree, source: bytes
    ) -> Iterator[tree_sitter.Node]:
        for child in tree.root_node.children:
            yield from self._unwrap(child)

    def _unwrap(self, node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
        if node.type in _DECLARATIONS:
            yield node
        elif node.type in _WRAPPERS:
            for child in node.named_children:
                yield from self._unwrap(child)

    def declaration_name(self, node: tree_sitter.Node, source: bytes) -> str:
        return display_name(node, source)

    def is_interface(self, node: tree_sitter.Node) -> bool:
        return node.type == INTERFACE

    def build_type(self, node: tree_sitter.Node, source: bytes) -> TypeRecord:
        if self.is_interface(node):
            return self._build_interface(node, source)
        return self._build_type_alias(node, source)

    def _build_interface(self, node: tree_sitter.Node, source: bytes) -> TypeRecord:
        """Members become the value mapping; extends come from the heritage clause."""
        value: Dict[str, str] = {}
        dependencies: List[str] = []

        body = node.child_by_field_name("body")
        for member in body.named_children if body else []:
            entry = self._extract_member(member, source)
            if entry is None:
                continue
            key, type_node = entry
            value[key] = render_type(type_node, source)
            dependencies.extend(collect_dependencies(type_node, source))

        return TypeRecord(
            name=display_name(node, source),
            value=value,
            dependencies=unique(dependencies),
            extends=self._extract_extends(node, source),
        )

    def _build_type_alias(self, node: tree_sitter.Node, source: bytes) -> TypeRecord:
        value_node = node.child_by_field_name("value")
        return TypeRecord(
            name=display_name(node, source),
            value=render_type(value_node, source),
            dependencies=collect_dependencies(value_node, source),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _extract_member(
        self, member: tree_sitter.Node, source: bytes
    ) -> Optional[Tuple[str, Optional[tree_sitter.Node]]]:
        """Return (member key, value type node) or None for non-members."""
        kind = member.type

        if kind == "property_signature":
            key = node_text(member.child_by_field_name("name"), source)
            if self._is_optional(member):
                key += "?"
            return key, unwrap_annotation(member.child_by_field_name("type"))

        if kind == "index_signature":
            return (
                f"[{escape_type_text(self._index_parameters(member, source))}]",
                unwrap_annotation(member.child_by_field_name("type")),
            )

        if kind == "method_signature":
            key = node_text(member.child_by_field_name("name"), source)
            if self._is_optional(member):
                key += "?"
            key += self._parameter_list(member, source)
            return key, unwrap_annotation(member.child_by_field_name("return_type"))

        if kind == "call_signature":
            return (
                self._parameter_list(member, source),
                unwrap_annotation(member.child_by_field_name("return_type")),
            )

        if kind == "construct_signature":
            return (
                f"new {self._parameter_list(member, source)}",
                unwrap_annotation(member.child_by_field_name("type")),
            )

        return None

    @staticmethod
    def _is_optional(member: tree_sitter.Node) -> bool:
        return any(child.type == "?" for child in member.children)

    @staticmethod
    def _index_parameters(member: tree_sitter.Node, source: bytes) -> str:
        """``key: string`` for a plain index signature, ``K in Keys`` for a mapped one."""
        for child in member.named_children:
            if child.type == "mapped_type_clause":
                return node_text(child, source)
        name = node_text(member.child_by_field_name("name"), source)
        index_type = node_text(member.child_by_field_name("index_type"), source)
        return f"{name}: {index_type}"

    @staticmethod
    def _parameter_list(member: tree_sitter.Node, source: bytes) -> str:
        params = member.child_by_field_name("parameters")
        if params is None:
            return "()"
        rendered = ", ".join(
            escape_type_text(node_text(p, source))
            for p in params.named_children
            if p.type != "comment"
        )
        return f"({rendered})"

    @staticmethod
    def _extract_extends(node: tree_sitter.Node, source: bytes) -> List[str]:
        """Base names from the first extends clause; generic arguments are dropped."""
        clause = next(
            (c for c in node.named_children if c.type == "extends_type_clause"), None
        )
        if clause is None:
            return []

        bases: List[str] = []
        for base in clause.named_children:
            if base.type == "comment":
                continue
            if base.type == "generic_type":
                base = base.child_by_field_name("name") or base
            bases.append(dotted_name(base, source))
        return bases
