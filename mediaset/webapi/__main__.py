"""Run the lookup API under uvicorn: ``python -m mediaset.webapi``."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from mediaset.config_manager import ConfigurationError, load_settings
from mediaset.config_manager.constants import CONFIG_PATH_ENV

UVICORN_LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m mediaset.webapi",
        description="Serve barcode and identifier lookups over HTTP",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: %(default)s)")
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Lookup configuration file; exported as {CONFIG_PATH_ENV} for the server process",
    )
    parser.add_argument("--reload", action="store_true", help="Restart when source files change")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=UVICORN_LOG_LEVELS,
        help="uvicorn log level (default: %(default)s)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print the effective settings with secrets masked, then exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.config is not None:
        os.environ[CONFIG_PATH_ENV] = str(args.config.expanduser())

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.print_settings:
        print(json.dumps(settings.redacted(), indent=2, sort_keys=True))
        return 0

    uvicorn.run(
        "mediaset.webapi.application:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
