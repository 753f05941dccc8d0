"""Type diagram generation.

Resolves edges between TypeRecords, compiles Mermaid class-diagram markup
and hands it to an external renderer.

Public API:
  DiagramService — orchestrator for scanning, writing and rendering
  compile_class_diagram — TypeRecords -> Mermaid markup
  resolve_edges — TypeRecords -> resolved dependency/inheritance edges
"""

from .graph import Edge, resolve_edges
from .mermaid import compile_class_diagram
from .service import DiagramService

__all__ = ["DiagramService", "Edge", "compile_class_diagram", "resolve_edges"]
