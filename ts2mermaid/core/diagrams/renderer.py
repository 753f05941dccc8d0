"""Mermaid markup -> SVG rendering, fire-and-forget.

Backends:
  mmdc: Mermaid CLI via `npx -p @mermaid-js/mermaid-cli mmdc -i <mmd> -o <svg>`
  http: Mermaid rendering server (mermaid.ink compatible) via GET with the
        markup base64-encoded in the URL
  none: rendering skipped

Rendering never blocks and never raises into the caller: the .mmd file is
already on disk, so a failed render only costs the .svg. Failures are logged.

Server resolution order for the http backend:
  1. server_url argument
  2. MERMAID_SERVER_URL env var
  3. https://mermaid.ink
"""

import base64
import logging
import os
import subprocess
import threading
from typing import List, Optional

import httpx

from ..constants import (
    DEFAULT_MERMAID_SERVER,
    MMDC_COMMAND,
    RENDERER_HTTP,
    RENDERER_MMDC,
    RENDERER_NONE,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Mermaid CLI rendering
# ---------------------------------------------------------------------------


def _render_via_mmdc(markup_path: str, svg_path: str) -> Optional[threading.Thread]:
    """Launch mmdc and watch it from a background thread.

    Returns the watcher thread, or None if the process could not be started.
    """
    cmd = MMDC_COMMAND + ["-i", markup_path, "-o", svg_path]

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        logger.error("exec error: %s", e)
        return None

    watcher = threading.Thread(
        target=_watch_process,
        args=(process, cmd),
        name=f"mmdc:{os.path.basename(svg_path)}",
    )
    watcher.start()
    return watcher


def _watch_process(process: subprocess.Popen, cmd: List[str]) -> None:
    _, stderr = process.communicate()
    if process.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip() if stderr else ""
        logger.error(
            "exec error: %s exited with %d: %s",
            " ".join(cmd),
            process.returncode,
            message[:300] if message else "(empty)",
        )
    else:
        logger.debug("Rendered %s", cmd[-1])


# ---------------------------------------------------------------------------
# HTTP server rendering
# ---------------------------------------------------------------------------


def _encode_markup(markup: str) -> str:
    """URL-safe base64, the form mermaid.ink accepts in its path."""
    return base64.urlsafe_b64encode(markup.encode("utf-8")).decode("ascii")


def _fetch_svg(markup: str, svg_path: str, server_url: Optional[str] = None) -> None:
    """Fetch the SVG for ``markup`` and write it to ``svg_path``; log on failure."""
    server = server_url or os.environ.get("MERMAID_SERVER_URL", DEFAULT_MERMAID_SERVER)
    server = server.rstrip("/")

    encoded = _encode_markup(markup)
    url = f"{server}/svg/{encoded}"

    logger.debug("Rendering Mermaid via HTTP %s (encoded len=%d)", server, len(encoded))

    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
    except httpx.RequestError as e:
        logger.error("Mermaid server request failed: %s", e)
        return

    body = response.text
    if response.status_code != 200 or "<svg" not in body[:500]:
        logger.error(
            "Mermaid server returned %d with non-SVG body: %s",
            response.status_code,
            body[:200],
        )
        return

    try:
        with open(svg_path, "w", encoding="utf-8") as f:
            f.write(body)
    except OSError as e:
        logger.error("Could not write %s: %s", svg_path, e)
        return

    logger.debug("Rendered %s via HTTP (%d chars SVG)", svg_path, len(body))


def _render_via_http(
    markup_path: str, svg_path: str, server_url: Optional[str] = None
) -> threading.Thread:
    with open(markup_path, "r", encoding="utf-8") as f:
        markup = f.read()

    worker = threading.Thread(
        target=_fetch_svg,
        args=(markup, svg_path, server_url),
        name=f"mermaid-http:{os.path.basename(svg_path)}",
    )
    worker.start()
    return worker


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_diagram(
    markup_path: str,
    svg_path: str,
    renderer: str = RENDERER_MMDC,
    server_url: Optional[str] = None,
) -> Optional[threading.Thread]:
    """Start rendering ``markup_path`` into ``svg_path`` without waiting.

    Args:
        markup_path: Path of the written .mmd file
        svg_path: Destination of the SVG
        renderer: "mmdc", "http" or "none"
        server_url: Rendering server for the http backend

    Returns:
        The background thread watching the render (join it to wait), or None
        when nothing was started.

    Raises:
        ValueError: If ``renderer`` is unknown
        OSError: If the http backend cannot read ``markup_path``
    """
    if renderer == RENDERER_NONE:
        logger.debug("Rendering disabled, skipping %s", svg_path)
        return None
    if renderer == RENDERER_MMDC:
        return _render_via_mmdc(markup_path, svg_path)
    if renderer == RENDERER_HTTP:
        return _render_via_http(markup_path, svg_path, server_url)
    raise ValueError(f"Unknown renderer '{renderer}'")
