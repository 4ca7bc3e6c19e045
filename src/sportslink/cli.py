from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .banner import build_banner_info, print_startup_banner
from .config import load_config
from .errors import ConfigError
from .logging_utils import configure_logging
from .pipeline import run
from .version import __version__

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sportslink",
        description="Attach today's live playlist streams to the cached sports schedule.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ["SPORTSLINK_CONFIG"]) if os.environ.get("SPORTSLINK_CONFIG") else None,
        help="Optional YAML config file (defaults to built-in settings)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", default=None, help="Explicit log level (overrides --verbose)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_level(args: argparse.Namespace) -> str:
    if args.log_level:
        return args.log_level
    return "DEBUG" if args.verbose else "INFO"


def run_merge(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    console = console or Console(stderr=True)
    try:
        configure_logging(_resolve_level(args), log_file=args.log_file, console=console)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return 2

    try:
        settings = load_config(args.config)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1

    print_startup_banner(build_banner_info(settings, verbose=args.verbose), console)
    try:
        result = run(settings)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Merge run failed: %s", exc)
        return 1
    if result.succeeded:
        LOGGER.info("Merge complete")
    else:
        LOGGER.warning("Run stopped early: %s", result.aborted_reason)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run_merge(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
