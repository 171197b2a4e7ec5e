"""Operator-facing statistics report for a batch run."""

from __future__ import annotations

import logging

from repochunk.application.dto import BatchResult
from repochunk.shared.constants import MAX_REPORTED_ERRORS

logger = logging.getLogger(__name__)


def format_stats_report(result: BatchResult) -> list[str]:
    """Render counts, timing, errors by kind and the first few errors."""
    stats = result.stats
    lines = [
        "=== Processing Statistics ===",
        f"Files processed: {stats.files_processed}",
        f"Chunks created: {stats.chunks_created}",
        f"Processing time: {result.elapsed_seconds:.2f}s",
    ]

    if stats.files_processed > 0 and stats.chunks_created > 0:
        lines.append(
            f"Average chunks per file: {stats.chunks_created / stats.files_processed:.1f}"
        )
        if result.elapsed_seconds > 0:
            rate = stats.files_processed / result.elapsed_seconds
            lines.append(f"Processing rate: {rate:.1f} files/sec")

    if stats.errors:
        summary = stats.summary()
        lines.append(
            f"Errors encountered: {summary.total} "
            f"({summary.recoverable} recoverable, {summary.non_recoverable} not)"
        )
        for kind, count in summary.by_kind.items():
            if count:
                lines.append(f"  {kind}: {count}")

        lines.append("First errors:")
        for index, error in enumerate(stats.errors[:MAX_REPORTED_ERRORS], start=1):
            lines.append(f"  {index}. {error.file_path}: {error.message}")
        hidden = len(stats.errors) - MAX_REPORTED_ERRORS
        if hidden > 0:
            lines.append(f"  ... and {hidden} more")

    return lines


def log_stats_report(result: BatchResult) -> None:
    """Write the report to the module logger, one record per line."""
    for line in format_stats_report(result):
        logger.info("%s", line)
