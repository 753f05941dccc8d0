"""AST Parser utilities.

Language detection, parser registry, and source discovery.
"""

import logging
import os
from typing import Dict, List, Optional, TYPE_CHECKING

from ..config import Configuration
from .models import TypeRecord

if TYPE_CHECKING:
    from .base import BaseDeclarationParser

logger = logging.getLogger(__name__)

# Extension → language mapping
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
}

# Directories to skip during file walking
SKIP_DIRECTORIES = frozenset({
    "node_modules",
    ".git",
})

# Parser registry, filled on first use so grammars load lazily
_parser_registry: Dict[str, "BaseDeclarationParser"] = {}


def detect_language(file_path: str) -> Optional[str]:
    """Detect language from file extension.

    Args:
        file_path: Path to the source file

    Returns:
        Language identifier string or None if unsupported
    """
    _, ext = os.path.splitext(file_path)
    return SUPPORTED_EXTENSIONS.get(ext.lower())


def get_parser(language: str) -> "BaseDeclarationParser":
    """Get a parser instance for the given language.

    Raises:
        ValueError: If language is not supported
    """
    if language not in _parser_registry:
        if language == "typescript":
            from .typescript_parser import TypeScriptParser
            _parser_registry["typescript"] = TypeScriptParser()
        else:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Supported: {sorted(set(SUPPORTED_EXTENSIONS.values()))}"
            )

    return _parser_registry[language]


def should_skip_directory(dir_name: str) -> bool:
    """Check if a directory should be skipped during file walking."""
    return dir_name in SKIP_DIRECTORIES or dir_name.startswith(".")


def is_supported_file(file_path: str) -> bool:
    return detect_language(file_path) is not None


def collect_types(path: str, configuration: Optional[Configuration] = None) -> List[TypeRecord]:
    """Collect TypeRecords from a file or, depth first, from a directory tree.

    Directory entries are visited in sorted order. Each call returns its own
    list; nothing is shared between sibling calls.

    Raises:
        OSError: If a path cannot be listed or read
    """
    if not os.path.isdir(path):
        return _parse_path(path, configuration)

    types: List[TypeRecord] = []
    for entry in sorted(os.listdir(path)):
        entry_path = os.path.join(path, entry)
        if os.path.isdir(entry_path):
            if should_skip_directory(entry):
                logger.debug(f"Skipping directory {entry_path}")
                continue
            types.extend(collect_types(entry_path, configuration))
        elif is_supported_file(entry_path):
            types.extend(_parse_path(entry_path, configuration))
    return types


def _parse_path(file_path: str, configuration: Optional[Configuration]) -> List[TypeRecord]:
    # An explicitly named file is parsed even without a .ts/.tsx extension
    parser = get_parser(detect_language(file_path) or "typescript")
    return parser.parse_file(file_path, configuration).types
