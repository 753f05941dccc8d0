"""Exceptions raised by ts2mermaid."""


class Ts2MermaidError(Exception):
    """Base exception for ts2mermaid."""
    pass


class ConfigurationError(Ts2MermaidError):
    """Raised when options are malformed (bad shape, bad regex, bad renderer)."""
    pass
