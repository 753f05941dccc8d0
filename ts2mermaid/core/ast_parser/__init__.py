"""ts2mermaid AST Parser — tree-sitter based declaration extraction.

Public API:
    parse_file(path, configuration) → ParseResult
    parse_source(source, file_path, configuration) → ParseResult
    collect_types(path, configuration) → list[TypeRecord]
"""

from typing import Optional

from ..config import Configuration
from .models import ParseError, ParseResult, TypeRecord
from .utils import collect_types, detect_language, get_parser, is_supported_file

__all__ = [
    "parse_file",
    "parse_source",
    "collect_types",
    "detect_language",
    "is_supported_file",
    "ParseError",
    "ParseResult",
    "TypeRecord",
]


def parse_file(file_path: str, configuration: Optional[Configuration] = None) -> ParseResult:
    """Parse a TypeScript file into TypeRecords.

    Args:
        file_path: Path to the source file
        configuration: Name filter and category flags

    Returns:
        ParseResult containing the retained declarations

    Raises:
        OSError: If the file cannot be read
    """
    parser = get_parser(detect_language(file_path) or "typescript")
    return parser.parse_file(file_path, configuration)


def parse_source(
    source_text: str,
    file_path: str = "source.ts",
    configuration: Optional[Configuration] = None,
) -> ParseResult:
    """Parse TypeScript source text into TypeRecords.

    Args:
        source_text: Source code as string
        file_path: File path (for metadata; ``.tsx`` selects the TSX grammar)
        configuration: Name filter and category flags
    """
    parser = get_parser(detect_language(file_path) or "typescript")
    return parser.parse_source(source_text, file_path, configuration)
