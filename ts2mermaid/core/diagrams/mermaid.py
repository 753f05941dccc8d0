"""Deterministic Mermaid generator for type class diagrams.

Takes TypeRecords and produces ``classDiagram`` markup. The arrow tokens
(``<..``, ``<..<``, ``<|--``) are what the downstream renderer expects and
must not change.
"""

from typing import Dict, List, Sequence

from ..ast_parser.models import TypeRecord
from .graph import DEPENDENCY, EXTENDS, Edge, resolve_edges


DIAGRAM_HEADER = "classDiagram"

DEPENDENCY_ARROW = "<.."
BIDIRECTIONAL_DEPENDENCY_ARROW = "<..<"
INHERITANCE_ARROW = "<|--"


def compile_class_diagram(
    types: Sequence[TypeRecord],
    hide_dependencies: bool = False,
    hide_extends: bool = False,
) -> str:
    """Generate Mermaid class diagram markup.

    Each type is followed by its own dependency arrows, then its own
    inheritance arrows.

    Args:
        types: Every record of the run; edges only resolve within this list
        hide_dependencies: Omit dependency arrows
        hide_extends: Omit inheritance arrows

    Returns:
        Markup text ending with a newline
    """
    edges_by_source: Dict[int, List[Edge]] = {}
    for edge in resolve_edges(types):
        if edge.kind == DEPENDENCY and hide_dependencies:
            continue
        if edge.kind == EXTENDS and hide_extends:
            continue
        edges_by_source.setdefault(edge.source, []).append(edge)

    lines = [DIAGRAM_HEADER]
    for position, type_record in enumerate(types):
        lines.extend(render_class(type_record))
        source_edges = edges_by_source.get(position, [])
        for edge in source_edges:
            if edge.kind == DEPENDENCY:
                lines.append(render_dependency(type_record, types[edge.target], edge.bidirectional))
        for edge in source_edges:
            if edge.kind == EXTENDS:
                lines.append(render_extends(types[edge.target], type_record))
        lines.append("")

    return "\n".join(lines) + "\n"


def render_class(type_record: TypeRecord) -> List[str]:
    """Render one class block with its stereotype and members."""
    lines = [f"class {type_record.name} {{", f"  <<{type_record.kind}>>"]

    if isinstance(type_record.value, dict):
        for member, rendered in type_record.value.items():
            lines.append(f"  {member}: {rendered}")
    else:
        lines.append(f"  {type_record.value}")

    lines.append("}")
    return lines


def render_dependency(source: TypeRecord, target: TypeRecord, bidirectional: bool = False) -> str:
    arrow = BIDIRECTIONAL_DEPENDENCY_ARROW if bidirectional else DEPENDENCY_ARROW
    return f"{source.name} {arrow} {target.name}"


def render_extends(base: TypeRecord, derived: TypeRecord) -> str:
    return f"{base.name} {INHERITANCE_ARROW} {derived.name}"
