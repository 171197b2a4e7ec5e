"""Command-line entry point: chunk a repository or a list of files.

Settings come from ``[tool.repochunk]`` in the working directory's
``pyproject.toml``; command-line flags override them.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pathlib import Path

from repochunk.application.dto import BatchResult
from repochunk.interfaces.api import batch_process
from repochunk.interfaces.report import log_stats_report
from repochunk.interfaces.toml_config import ChunkConfig, load_chunk_config
from repochunk.shared.exceptions import (
    ChunkingError,
    ConfigurationError,
    InvalidBudgetError,
)

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repochunk",
        description="Split source files into token-bounded, symbol-aware chunks.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="A repository directory to scan, or the source files to chunk.",
    )
    parser.add_argument("--max-tokens", type=int, help="Token budget per chunk.")
    parser.add_argument("--model", help="Embedding model whose encoding counts tokens.")
    parser.add_argument("--concurrency", type=int, help="Number of files chunked at once.")
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that fails instead of recording it.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="GLOB",
        help="Skip paths matching GLOB, relative to the scanned directory. Repeatable.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        metavar="FILE",
        help="Write chunks as JSON Lines to FILE.",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Directory whose pyproject.toml is read (default: current directory).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _merge(config: ChunkConfig, args: argparse.Namespace) -> ChunkConfig:
    return ChunkConfig(
        max_tokens=args.max_tokens if args.max_tokens is not None else config.max_tokens,
        model=args.model or config.model,
        concurrency=args.concurrency if args.concurrency is not None else config.concurrency,
        continue_on_error=False if args.fail_fast else config.continue_on_error,
        extensions=config.extensions,
        exclude_patterns=[*config.exclude_patterns, *args.exclude],
        tolerate_syntax_errors=config.tolerate_syntax_errors,
    )


def _write_jsonl(result: BatchResult, output: Path) -> None:
    with output.open("w", encoding="utf-8") as f:
        for chunk in result.chunks:
            f.write(json.dumps(chunk.to_dict(), ensure_ascii=False))
            f.write("\n")
    logger.info("Wrote %d chunks to %s", len(result.chunks), output)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, run the batch, report and optionally export."""
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = _merge(load_chunk_config(args.project_root), args)
        result = batch_process(
            args.paths if len(args.paths) > 1 else args.paths[0],
            max_tokens=config.max_tokens,
            model_name=config.model,
            concurrency=config.concurrency,
            continue_on_error=config.continue_on_error,
            extensions=config.extensions or None,
            exclude_patterns=config.exclude_patterns,
            tolerate_syntax_errors=config.tolerate_syntax_errors,
        )
    except (ConfigurationError, InvalidBudgetError) as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)
    except ChunkingError as e:
        logger.error("Chunking aborted: %s", e)
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected failure")
        sys.exit(1)

    log_stats_report(result)

    if args.output is not None:
        try:
            _write_jsonl(result, args.output)
        except OSError as e:
            logger.error("Failed to write %s: %s", args.output, e)
            sys.exit(1)


if __name__ == "__main__":
    main()
