"""Shared constants for ts2mermaid.

Defaults used when a configuration leaves a field unset.
"""

# =============================================================================
# Output locations
# =============================================================================

# Directory scanned when no path_to_scan is configured
DEFAULT_PATH_TO_SCAN = "src"

# Directory receiving .json / .mmd / .svg / .md output
DEFAULT_PATH_TO_SAVE = "mermaid"

# Base file name for a single configuration and for each list entry
DEFAULT_FILE_NAME = "types"

# Index document listing every list entry (written under the global save path)
INDEX_FILE_NAME = "types.md"

# =============================================================================
# Rendering
# =============================================================================

RENDERER_MMDC = "mmdc"
RENDERER_HTTP = "http"
RENDERER_NONE = "none"

RENDERERS = (RENDERER_MMDC, RENDERER_HTTP, RENDERER_NONE)

DEFAULT_RENDERER = RENDERER_MMDC

# Mermaid CLI, fetched on demand through npx
MMDC_COMMAND = ["npx", "-p", "@mermaid-js/mermaid-cli", "mmdc"]

DEFAULT_MERMAID_SERVER = "https://mermaid.ink"
