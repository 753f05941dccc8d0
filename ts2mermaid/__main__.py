import argparse
import logging
import sys
from typing import List, Optional

from .core.config import Configuration, apply_overrides, load_options
from .core.constants import RENDERERS
from .core.diagrams import DiagramService
from .core.exceptions import ConfigurationError


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ts2mermaid",
        description="Render TypeScript interfaces and type aliases as a Mermaid class diagram",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with a configuration, a list of configurations, or {global, list}"
    )
    parser.add_argument("--path-to-scan", type=str, help="File or directory to scan (default: src)")
    parser.add_argument("--path-to-save", type=str, help="Output directory (default: mermaid)")
    parser.add_argument("--name", type=str, help="Output file name (default: types)")
    parser.add_argument(
        "--include",
        action="append",
        metavar="REGEX",
        help="Keep only declarations whose name matches (repeatable)"
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="REGEX",
        help="Drop declarations whose name matches (repeatable)"
    )
    parser.add_argument("--hide-types", action="store_true", default=None, help="Drop type aliases")
    parser.add_argument("--hide-interfaces", action="store_true", default=None, help="Drop interfaces")
    parser.add_argument("--hide-dependencies", action="store_true", default=None, help="Omit dependency arrows")
    parser.add_argument("--hide-extends", action="store_true", default=None, help="Omit inheritance arrows")
    parser.add_argument("--renderer", type=str, choices=RENDERERS, help="SVG renderer (default: mmdc)")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> Configuration:
    """Configuration holding only the flags given on the command line."""
    fields = {
        "name": args.name,
        "path_to_scan": args.path_to_scan,
        "path_to_save": args.path_to_save,
        "include": args.include,
        "exclude": args.exclude,
        "hide_types": args.hide_types,
        "hide_interfaces": args.hide_interfaces,
        "hide_dependencies": args.hide_dependencies,
        "hide_extends": args.hide_extends,
        "renderer": args.renderer,
    }
    return Configuration.model_validate({k: v for k, v in fields.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for ts2mermaid."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        overrides = _overrides_from_args(args)
        if args.config:
            options = apply_overrides(load_options(args.config), overrides)
        else:
            options = overrides
        results = DiagramService().run(options)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Run aborted: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid option: {e}")
        return 1

    for result in results:
        logger.info(f"Wrote {result['markup_path']} ({len(result['types'])} types)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
