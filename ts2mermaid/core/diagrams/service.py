"""DiagramService — orchestrator for one run over one or more configurations.

Per configuration:
  1. collect TypeRecords from the scan path (file or directory tree)
  2. write <name>.json (the records) and <name>.mmd (the class diagram)
  3. start rendering <name>.svg in the background
  4. write <name>.md pointing at the SVG

Filesystem errors propagate and abort the run; render failures are only
logged by the renderer.
"""

import json
import logging
import os
import threading
from typing import Any, Dict, List, Optional, Union

from ..ast_parser import collect_types
from ..config import Configuration, Options, merge_configurations
from ..constants import (
    DEFAULT_FILE_NAME,
    DEFAULT_PATH_TO_SAVE,
    DEFAULT_PATH_TO_SCAN,
    INDEX_FILE_NAME,
)
from .mermaid import compile_class_diagram
from .renderer import render_diagram

logger = logging.getLogger(__name__)


class DiagramService:
    """Scans, writes and renders type diagrams for a set of options."""

    def __init__(self, server_url: Optional[str] = None):
        """Initialize DiagramService.

        Args:
            server_url: Rendering server for configurations using the http renderer
        """
        self._server_url = server_url
        self._renders: List[threading.Thread] = []

    def process_configuration(
        self,
        path_to_scan: str,
        path_to_save: str,
        file_name: str,
        configuration: Optional[Configuration] = None,
    ) -> Dict[str, Any]:
        """Scan one path and write the diagram files for it.

        Args:
            path_to_scan: File or directory containing TypeScript sources
            path_to_save: Output directory (created if missing)
            file_name: Base name of the output files
            configuration: Filters and hide flags

        Returns:
            {types, json_path, markup_path, svg_path, md_path}

        Raises:
            OSError: If a source cannot be read or an output cannot be written
        """
        configuration = configuration or Configuration()
        os.makedirs(path_to_save, exist_ok=True)

        types = collect_types(path_to_scan, configuration)
        logger.info(f"Collected {len(types)} types from {path_to_scan}")

        json_path = os.path.join(path_to_save, f"{file_name}.json")
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([t.to_dict() for t in types], f, indent=2)

        markup_path = os.path.join(path_to_save, f"{file_name}.mmd")
        with open(markup_path, "w", encoding="utf-8") as f:
            f.write(
                compile_class_diagram(
                    types,
                    hide_dependencies=configuration.hide_dependencies,
                    hide_extends=configuration.hide_extends,
                )
            )

        svg_path = os.path.join(path_to_save, f"{file_name}.svg")
        render = render_diagram(
            markup_path, svg_path, configuration.renderer, self._server_url
        )
        if render is not None:
            self._renders.append(render)

        md_path = os.path.join(path_to_save, f"{file_name}.md")
        with open(md_path, "w", encoding="utf-8") as f:
            f.write(f"![diagram](./{file_name}.svg)")

        return {
            "types": types,
            "json_path": json_path,
            "markup_path": markup_path,
            "svg_path": svg_path,
            "md_path": md_path,
        }

    def run(self, options: Union[Configuration, Options, None] = None) -> List[Dict[str, Any]]:
        """Process a single configuration or every entry of a list.

        A single configuration writes <save>/<name or "types">.*; list entry
        i writes <save>/<name or i+1>/types.* and, when the entry has no
        save path of its own, is listed in <global save>/types.md.
        """
        if options is None:
            options = Configuration()

        if isinstance(options, Configuration):
            return [
                self.process_configuration(
                    options.path_to_scan or DEFAULT_PATH_TO_SCAN,
                    options.path_to_save or DEFAULT_PATH_TO_SAVE,
                    options.name or DEFAULT_FILE_NAME,
                    options,
                )
            ]

        results = []
        index_created = False
        global_configuration = options.global_configuration

        for position, entry in enumerate(options.configurations):
            configuration = merge_configurations(global_configuration, entry)
            name = configuration.name or str(position + 1)

            results.append(
                self.process_configuration(
                    configuration.path_to_scan or DEFAULT_PATH_TO_SCAN,
                    os.path.join(configuration.path_to_save or DEFAULT_PATH_TO_SAVE, name),
                    DEFAULT_FILE_NAME,
                    configuration,
                )
            )

            if not configuration.path_to_save:
                index_dir = global_configuration.path_to_save or DEFAULT_PATH_TO_SAVE
                index_path = os.path.join(index_dir, INDEX_FILE_NAME)

                if not index_created:
                    index_created = True
                    os.makedirs(index_dir, exist_ok=True)
                    with open(index_path, "w", encoding="utf-8"):
                        pass

                with open(index_path, "a", encoding="utf-8") as f:
                    f.write(f"# {name}\n\n![{name}](./{name}/{DEFAULT_FILE_NAME}.svg)\n\n")

        return results

    def wait_for_renders(self, timeout: Optional[float] = None) -> None:
        """Block until every render started by this service has finished."""
        for render in self._renders:
            render.join(timeout)
        self._renders = [r for r in self._renders if r.is_alive()]
