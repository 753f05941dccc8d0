"""AST Parser data models.

Defines the core data structures for extracted type declarations.
Pure data containers; parsing lives in the language parsers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

GENERIC_DELIMITER = "~"


@dataclass
class TypeRecord:
    """A single interface or type alias declaration.

    One TypeRecord is built per retained top-level declaration and becomes
    one class block in the diagram.
    """

    name: str  # "Box~T~"
    value: Union[str, Dict[str, str]]  # alias text, or member -> type text
    dependencies: List[str] = field(default_factory=list)  # ["Item", "Ns.Other"]
    extends: List[str] = field(default_factory=list)  # ["Base"]

    @property
    def bare_name(self) -> str:
        """Name with the generic parameter suffix stripped."""
        return self.name.split(GENERIC_DELIMITER)[0]

    @property
    def kind(self) -> str:
        return "interface" if isinstance(self.value, dict) else "type"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": dict(self.value) if isinstance(self.value, dict) else self.value,
            "dependencies": list(self.dependencies),
            "extends": list(self.extends),
        }


@dataclass
class ParseError:
    """An error encountered during parsing."""

    file_path: str
    line: int
    message: str
    severity: str = "warning"  # "warning" | "error"


@dataclass
class ParseResult:
    """Complete parse output for a single file."""

    file_path: str
    language: str
    types: List[TypeRecord]
    line_count: int = 0
    errors: List[ParseError] = field(default_factory=list)
