"""ts2mermaid — TypeScript interfaces and type aliases as Mermaid class diagrams."""

from typing import Any, Dict, List, Union

from .core.ast_parser import TypeRecord, collect_types, parse_source
from .core.config import Configuration, Options, load_options, parse_options
from .core.diagrams import DiagramService, compile_class_diagram
from .core.exceptions import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "run",
    "collect_types",
    "compile_class_diagram",
    "parse_source",
    "parse_options",
    "load_options",
    "Configuration",
    "ConfigurationError",
    "DiagramService",
    "Options",
    "TypeRecord",
]


def run(options: Union[Configuration, Options, Dict[str, Any], List[Any], None] = None) -> List[Dict[str, Any]]:
    """Run every configuration in ``options`` and write the diagram files.

    ``options`` may be a Configuration, an Options bundle, or the equivalent
    plain data (as loaded from YAML).
    """
    if not isinstance(options, (Configuration, Options)):
        options = parse_options(options)
    return DiagramService().run(options)
