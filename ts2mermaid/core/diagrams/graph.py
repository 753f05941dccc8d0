"""Dependency and inheritance edges between TypeRecords.

Names resolve to the first record with the same bare name; names that do not
resolve (library or ambient types outside the scanned tree) produce no edge.

Dependency edges are collected for every record before trimming, so a mutual
reference collapses to one bidirectional edge regardless of which side is
visited first. Records are never mutated.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

from ..ast_parser.models import TypeRecord

logger = logging.getLogger(__name__)

DEPENDENCY = "dependency"
EXTENDS = "extends"


@dataclass(frozen=True)
class Edge:
    """A resolved edge between two records, by position in the record list.

    For dependencies ``source`` references ``target``; for inheritance
    ``source`` is the derived type and ``target`` its base.
    """

    source: int
    target: int
    kind: str = DEPENDENCY
    bidirectional: bool = False


def bare_name_index(types: Sequence[TypeRecord]) -> Dict[str, int]:
    """Map each bare name to the position of its first declaration."""
    index: Dict[str, int] = {}
    for position, type_record in enumerate(types):
        index.setdefault(type_record.bare_name, position)
    return index


def dependency_edges(types: Sequence[TypeRecord]) -> List[Edge]:
    """Resolved dependency edges with reciprocal pairs merged.

    A pair referencing each other in both directions yields one edge marked
    bidirectional, attributed to the earlier of the two records. A
    self-reference is its own reverse and is bidirectional too.
    """
    index = bare_name_index(types)

    pairs: List[Tuple[int, int]] = []
    for source, type_record in enumerate(types):
        for name in type_record.dependencies:
            target = index.get(name)
            if target is not None:
                pairs.append((source, target))

    present = set(pairs)
    seen: Set[frozenset] = set()
    edges: List[Edge] = []
    for source, target in pairs:
        key = frozenset((source, target))
        if key in seen:
            continue
        seen.add(key)
        edges.append(
            Edge(
                source=source,
                target=target,
                kind=DEPENDENCY,
                bidirectional=(target, source) in present,
            )
        )
    return edges


def extends_edges(types: Sequence[TypeRecord]) -> List[Edge]:
    """Resolved inheritance edges, derived -> base."""
    index = bare_name_index(types)
    edges: List[Edge] = []
    seen: Set[Tuple[int, int]] = set()
    for source, type_record in enumerate(types):
        for name in type_record.extends:
            target = index.get(name)
            if target is None or (source, target) in seen:
                continue
            seen.add((source, target))
            edges.append(Edge(source=source, target=target, kind=EXTENDS))
    return edges


def resolve_edges(types: Sequence[TypeRecord]) -> List[Edge]:
    """All resolved edges: dependencies first, then inheritance."""
    edges = dependency_edges(types) + extends_edges(types)
    logger.debug(f"Resolved {len(edges)} edges between {len(types)} types")
    return edges
