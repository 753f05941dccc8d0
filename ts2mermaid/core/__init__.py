"""Core of ts2mermaid: declaration parsing, configuration and diagram generation."""
