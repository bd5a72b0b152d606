"""Command-line entry point for hashing assets referenced from HTML."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Sequence

from .config import (
    BuildConfig,
    DEFAULT_ALGORITHM,
    DEFAULT_HASH_LENGTH,
    DEFAULT_WORKERS,
    DOCUMENT_EXTENSIONS,
)
from .pipeline import run_build

logger = logging.getLogger("hashed_assets.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Rewrite HTML documents so local scripts, stylesheets and images "
            "point at content-hashed filenames."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="HTML documents, or directories to search for them",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Site root for URLs starting with '/' (default: current directory)",
    )
    parser.add_argument(
        "--algorithm",
        default=DEFAULT_ALGORITHM,
        help="hashlib algorithm used to fingerprint assets",
    )
    parser.add_argument(
        "--hash-length",
        type=int,
        default=DEFAULT_HASH_LENGTH,
        help="Number of hex digits kept from the digest",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Threads used for the extraction pass",
    )
    parser.add_argument(
        "--no-emit",
        action="store_true",
        help="Rewrite documents without copying assets to their hashed names",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = BuildConfig(
        root=(args.root or Path.cwd()).resolve(),
        algorithm=args.algorithm,
        hash_length=args.hash_length,
        workers=args.workers,
        emit_assets=not args.no_emit,
        extensions=DOCUMENT_EXTENSIONS,
    )

    overall_start = time.perf_counter()
    metrics = run_build(args.paths, config)
    total_elapsed = time.perf_counter() - overall_start

    logger.info(
        "Finished in %.2fs (%d document(s), %d dependency(ies))",
        total_elapsed,
        len(metrics),
        sum(metric.dependency_count for metric in metrics),
    )

    if args.verbose:
        for metric in metrics:
            logger.debug(
                "Timing for %s -> extract: %.3fs | substitute: %.3fs | marks: %d",
                metric.path,
                metric.extract_seconds,
                metric.substitute_seconds,
                metric.mark_count,
            )


if __name__ == "__main__":
    main()
