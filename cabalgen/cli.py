"""CLI entrypoint for cabalgen."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging, get_logger
from .package import read_config

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cabalgen",
        description="Resolve a package.yaml into its targets and their modules.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to package.yaml or the directory holding it (defaults to current directory).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Resolve the manifest and print the package as JSON."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        package = read_config(args.path)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        logger.debug("Traversal failed", exc_info=True)
        parser.exit(1, f"cabalgen failed: {exc}\nRun with --verbose for more details.\n")

    print(json.dumps(dataclasses.asdict(package), indent=2))


if __name__ == "__main__":
    main(sys.argv[1:])
