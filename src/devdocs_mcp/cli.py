"""Command-line entry point: serve the docs tools over stdio until EOF."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from devdocs_mcp.catalog import load_catalog
from devdocs_mcp.foundation.config import DevdocsSettings, get_settings
from devdocs_mcp.foundation.errors import CatalogError
from devdocs_mcp.observability import configure_logging, get_logger
from devdocs_mcp.server import build_server, serve_stdio

STARTUP_NOTICE = "devdocs-mcp server started"

log = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devdocs-mcp",
        description="MCP server proxying Angular, TypeScript, RxJS, Jest and Nx documentation over stdio.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log threshold for stderr output (default: DEVDOCS_LOG_LEVEL or WARNING).",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json", "none"],
        help="Log renderer (default: DEVDOCS_LOG_FORMAT or console).",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="JSON file of extra technologies merged into the built-in catalog.",
    )
    return parser


def apply_overrides(settings: DevdocsSettings, args: argparse.Namespace) -> DevdocsSettings:
    """Command-line flags win over environment and .env values."""
    logging_updates = {k: v for k, v in (("level", args.log_level), ("format", args.log_format)) if v}
    update: dict[str, object] = {}
    if logging_updates:
        update["logging"] = settings.logging.model_copy(update=logging_updates)
    if args.catalog is not None:
        update["catalog_path"] = args.catalog
    return settings.model_copy(update=update) if update else settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.logging.format, settings.logging.level)

    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogError as e:
        raise SystemExit(f"devdocs-mcp: {e}") from e

    server = build_server(settings, catalog=catalog)
    print(STARTUP_NOTICE, file=sys.stderr, flush=True)
    log.info("serving", technologies=list(catalog.technologies()), fanout=settings.fanout_policy)
    try:
        asyncio.run(serve_stdio(server))
    except KeyboardInterrupt:
        return 130
    return 0
