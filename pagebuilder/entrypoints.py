"""
pagebuilder/entrypoints.py - Logging setup and command line entry point

Commands:
    pagebuilder validate <page.json>           Report validation errors per section
    pagebuilder render <page.json> [--preview] Render the page with error isolation
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import argparse
import json
import logging
import sys

from pagebuilder.config import get_config, load_config

logger = logging.getLogger("pagebuilder.entrypoints")


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


# Handlers installed by the last setup_logging call
_installed_handlers: List[logging.Handler] = []


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure application logging.

    Arguments left as None are taken from the logging section of the
    current configuration. Handlers from an earlier call are removed, so
    repeated setup never duplicates output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        log_format: Format string for text logs
    """
    settings = get_config().logging
    level = level or settings.level
    log_file = log_file or settings.log_file
    json_format = settings.json_logs if json_format is None else json_format
    log_format = log_format or settings.format

    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JSONFormatter() if json_format else logging.Formatter(log_format)

    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(log_level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)


def _cmd_validate(parsed: argparse.Namespace) -> int:
    from pagebuilder.persistence import load_page_file
    from pagebuilder.validators import validate_section

    sections = load_page_file(parsed.page)
    report = []
    for section in sorted(sections, key=lambda s: s.order):
        errors = validate_section(section)
        report.append({
            "id": section.id,
            "type": section.type,
            "errors": [e.to_dict() for e in errors],
        })

    if parsed.json:
        print(json.dumps(report, indent=2))
    else:
        for entry in report:
            status = "ok" if not entry["errors"] else f"{len(entry['errors'])} error(s)"
            print(f"{entry['id']} ({entry['type']}): {status}")
            for error in entry["errors"]:
                print(f"  - {error['field']}: {error['message']}")

    return 1 if any(entry["errors"] for entry in report) else 0


def _cmd_render(parsed: argparse.Namespace) -> int:
    from pagebuilder.core.store import SectionStore
    from pagebuilder.persistence import load_page_file
    from pagebuilder.rendering import PageRenderer

    store = SectionStore(page_id=Path(parsed.page).stem)
    store.load(load_page_file(parsed.page))
    page = PageRenderer(store, show_error_details=parsed.details).render_page(is_preview=parsed.preview)

    if parsed.json:
        print(json.dumps({
            "html": page.html,
            "errored": page.errored_ids,
        }, indent=2))
    else:
        print(page.html)
    return 1 if page.errored_ids else 0


def cli_main(args: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="Page builder editing core tools",
        prog="pagebuilder",
    )
    parser.add_argument(
        "--config",
        help="Config file path (JSON)",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (defaults to the configured level)",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate every section of a page file")
    validate.add_argument("page", help="Page JSON document or list of sections")
    validate.set_defaults(handler=_cmd_validate)

    render = commands.add_parser("render", help="Render a page file to HTML")
    render.add_argument("page", help="Page JSON document or list of sections")
    render.add_argument("--preview", action="store_true", help="Render in editor preview mode")
    render.add_argument("--details", action="store_true", help="Include tracebacks in error cards")
    render.set_defaults(handler=_cmd_render)

    parsed = parser.parse_args(args)
    if parsed.config:
        load_config(parsed.config)
    setup_logging(level=parsed.log_level, log_file=parsed.log_file)

    try:
        return parsed.handler(parsed)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read page file {parsed.page}: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 2


def main():
    """Console script entry point."""
    sys.exit(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
