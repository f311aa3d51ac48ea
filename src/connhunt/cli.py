"""Command-line entry point for connhunt scans.

``connhunt [DIR ...]`` walks the given directories (default: the current
directory), extracts connection declarations and writes ``connections.csv``
and ``errors.csv`` into ``--output-dir``. Progress messages go to stderr and
are appended to a log file. Per-file problems end up in ``errors.csv`` and
never change the exit code; a completed batch always exits with 0.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Sequence

from .config import ConfigError, ScanConfig, load_config
from .core.pipeline import ExtractionPipeline
from .core.types import ExtractionResult
from .log import configure_logging, get_logger
from .reporting import write_json_lines, write_tables
from .walk import WalkError, walk_files

DEFAULT_LOG_FILE = "connhunt.log"

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="connhunt",
        description="Find database connection declarations in configuration files.",
    )
    parser.add_argument(
        "directories",
        nargs="*",
        type=Path,
        help="Directories to scan (default: current directory).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory where connections.csv and errors.csv are written (default: .).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON configuration file with scan settings.",
    )
    parser.add_argument(
        "--policy",
        choices=("strict", "lenient"),
        default=None,
        help="Validity policy for partially resolved declarations (default: strict).",
    )
    parser.add_argument(
        "--lenient-tags",
        action="store_true",
        default=None,
        help="Treat any opening tag, not only <add>, as an attribute candidate.",
    )
    parser.add_argument(
        "--extension",
        action="append",
        dest="extensions",
        default=None,
        help="File extension to scan (repeatable; replaces the default allow-list).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Also print results to stdout as JSON lines.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path(DEFAULT_LOG_FILE),
        help=f"Log file appended to on every run (default: {DEFAULT_LOG_FILE}).",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Only log to stderr.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )
    return parser


def _resolve_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> ScanConfig:
    try:
        config = load_config(args.config) if args.config is not None else ScanConfig()
        return config.with_overrides(
            policy=args.policy,
            lenient_tags=args.lenient_tags,
            extensions=tuple(args.extensions) if args.extensions else None,
        )
    except (ConfigError, OSError) as exc:
        parser.error(f"invalid configuration: {exc}")
        raise  # pragma: no cover - parser.error exits


def _collect_files(directories: Sequence[Path], config: ScanConfig) -> List[Path]:
    files: List[Path] = []
    for directory in directories:
        if not directory.is_dir():
            logger.error("Could not find directory %s - skipping.", directory)
            continue
        found = 0
        for entry in walk_files(
            [directory],
            extensions=config.extensions,
            follow_symlinks=config.follow_symlinks,
            on_error=config.on_walk_error,
        ):
            if not entry.ok:
                logger.warning("Skipping %s: %s", entry.path, entry.error)
                continue
            files.append(entry.path)
            found += 1
        if not found:
            logger.info("Could not find any matching files in %s.", directory)
    return files


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(sys.argv[1:]) if argv is None else list(argv))

    configure_logging(
        level="DEBUG" if args.verbose else "INFO",
        log_file=None if args.no_log_file else args.log_file,
    )
    logger.info("Program started.")

    config = _resolve_config(args, parser)
    directories: List[Path] = list(args.directories) or [Path(".")]
    logger.info("Running on directories: %s", ", ".join(str(d) for d in directories))

    try:
        files = _collect_files(directories, config)
    except WalkError as exc:
        logger.error("Directory walk aborted: %s", exc)
        return 1

    result: ExtractionResult = ExtractionPipeline(config).run(files)
    logger.info(
        "Scanned %d file(s): %d connection(s), %d error(s).",
        len(files),
        len(result.connections),
        len(result.errors),
    )

    try:
        paths = write_tables(result, args.output_dir)
    except OSError as exc:
        logger.error("Could not write results to %s: %s", args.output_dir, exc)
        return 1
    logger.info("Wrote %s and %s.", paths.connections, paths.errors)

    if args.json:
        write_json_lines(
            result,
            sys.stdout,
            extra_metadata={
                "roots": [str(directory) for directory in directories],
                "files_scanned": len(files),
                "policy": config.policy.value,
            },
        )

    logger.info("Finished.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())


def console_main() -> None:
    """Entry point for ``connhunt`` console script."""

    sys.exit(main())
