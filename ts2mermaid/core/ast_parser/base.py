"""Base interface for language-specific declaration parsers.

Defines the Strategy pattern base class that all language parsers implement.
Shared parsing logic (reading, tree-sitter invocation, name filtering and
category hiding) lives here; language-specific extraction is delegated.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

import tree_sitter

from ..config import Configuration
from .models import ParseError, ParseResult, TypeRecord

logger = logging.getLogger(__name__)


def name_matches(name: str, configuration: Optional[Configuration] = None) -> bool:
    """Apply the include/exclude name filter.

    - neither list configured: every name passes
    - include configured: only names matching an include pattern pass,
      whatever the exclude list says
    - only exclude configured: names matching no exclude pattern pass
    """
    if configuration is None:
        return True

    include = configuration.include_patterns
    if include:
        return any(p.search(name) for p in include)

    exclude = configuration.exclude_patterns
    if exclude:
        return not any(p.search(name) for p in exclude)

    return True


class BaseDeclarationParser(ABC):
    """Abstract base for tree-sitter declaration parsers.

    Subclasses implement:
    - get_language(): returns language name string
    - get_tree_sitter_language(): returns tree-sitter Language for a file
    - iter_declarations(): yields top-level interface/alias nodes
    - declaration_name(): display name used for filtering and identity
    - is_interface(): category of a declaration node
    - build_type(): normalizes one declaration node into a TypeRecord
    """

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier (e.g., 'typescript')."""
        ...

    @abstractmethod
    def get_tree_sitter_language(self, file_path: str) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this file."""
        ...

    @abstractmethod
    def iter_declarations(
        self, tree: tree_sitter.Tree, source: bytes
    ) -> Iterator[tree_sitter.Node]:
        """Yield the top-level declaration nodes of interest, in source order."""
        ...

    @abstractmethod
    def declaration_name(self, node: tree_sitter.Node, source: bytes) -> str:
        ...

    @abstractmethod
    def is_interface(self, node: tree_sitter.Node) -> bool:
        ...

    @abstractmethod
    def build_type(self, node: tree_sitter.Node, source: bytes) -> TypeRecord:
        """Normalize a declaration node.

        Args:
            node: Declaration node yielded by iter_declarations()
            source: Raw source bytes

        Returns:
            TypeRecord for the declaration
        """
        ...

    def parse_file(
        self, file_path: str, configuration: Optional[Configuration] = None
    ) -> ParseResult:
        """Parse a source file into a ParseResult.

        Raises:
            OSError: If the file cannot be read. A discovered path that
                cannot be read aborts the whole scan.
        """
        with open(file_path, "r", encoding="utf-8") as f:
            source_text = f.read()

        return self.parse_source(source_text, file_path, configuration)

    def parse_source(
        self,
        source_text: str,
        file_path: str,
        configuration: Optional[Configuration] = None,
    ) -> ParseResult:
        """Parse source code string into a ParseResult.

        Args:
            source_text: Source code as string
            file_path: File path (for metadata and grammar selection)
            configuration: Name filter and category flags

        Returns:
            ParseResult with the retained declarations
        """
        errors: List[ParseError] = []
        source_bytes = source_text.encode("utf-8")
        line_count = source_text.count("\n") + (1 if source_text and not source_text.endswith("\n") else 0)

        parser = tree_sitter.Parser(self.get_tree_sitter_language(file_path))
        tree = parser.parse(source_bytes)

        # Malformed input still yields a partial tree; keep going
        if tree.root_node.has_error:
            logger.warning(f"Tree-sitter reported parse errors in {file_path}")
            errors.append(
                ParseError(
                    file_path=file_path,
                    line=0,
                    message="Tree-sitter reported parse errors in file",
                    severity="warning",
                )
            )

        types: List[TypeRecord] = []
        for node in self.iter_declarations(tree, source_bytes):
            name = self.declaration_name(node, source_bytes)
            if not name_matches(name, configuration):
                continue
            if configuration is not None:
                if configuration.hide_interfaces and self.is_interface(node):
                    continue
                if configuration.hide_types and not self.is_interface(node):
                    continue

            try:
                types.append(self.build_type(node, source_bytes))
            except Exception as e:
                logger.error(f"Failed to normalize {name} in {file_path}: {e}")
                errors.append(
                    ParseError(
                        file_path=file_path,
                        line=node.start_point.row + 1,
                        message=f"Declaration normalization failed: {e}",
                        severity="error",
                    )
                )

        logger.debug(
            f"{file_path} ({self.get_language()}, {line_count} lines): "
            f"{len(types)} declarations retained"
        )

        return ParseResult(
            file_path=file_path,
            language=self.get_language(),
            types=types,
            line_count=line_count,
            errors=errors,
        )
