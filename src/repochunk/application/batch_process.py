"""Batch Process use case: chunk many files with a bounded worker pool."""

from __future__ import annotations

import logging
import time

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import cast

from repochunk.application.chunk_file import ChunkFile
from repochunk.application.dto import (
    BatchProcessCommand,
    BatchResult,
    ChunkFileCommand,
    FileOutcome,
)
from repochunk.domain.chunking.value_objects import (
    FileChunk,
    ProcessingError,
    ProcessingStats,
)
from repochunk.shared.exceptions import ConfigurationError, InvalidBudgetError
from repochunk.shared.types import FilePath

logger = logging.getLogger(__name__)


def validate_batch_options(cmd: BatchProcessCommand) -> None:
    """Reject a command before any file is touched.

    Raises:
        InvalidBudgetError: If ``max_tokens`` is not positive.
        ConfigurationError: If ``concurrency`` is not positive or the model
            name is empty.
    """
    if cmd.max_tokens <= 0:
        raise InvalidBudgetError(cmd.max_tokens)
    if cmd.concurrency <= 0:
        msg = f"concurrency must be greater than 0, got {cmd.concurrency}"
        raise ConfigurationError(msg)
    if not cmd.model_name:
        msg = "model_name is required"
        raise ConfigurationError(msg)


# =============================================================================
# USE CASE
# =============================================================================


@dataclass
class BatchProcessor:
    """Runs ChunkFile over a file list with per-file failure isolation.

    Workers only chunk; every completed outcome is folded into the stats
    and the chunk list on the calling thread.
    """

    chunk_file: ChunkFile

    def run(self, cmd: BatchProcessCommand) -> BatchResult:
        """Chunk every file in the command.

        Args:
            cmd: Files, budget, model, pool size and failure policy.

        Returns:
            Stats, all chunks sorted by ``(file_path, start_line)``, and the
            elapsed wall time.

        Raises:
            InvalidBudgetError: If ``max_tokens`` is not positive.
            ConfigurationError: If the pool size or model name is invalid.
            ChunkingError: With ``continue_on_error`` off, the first per-file
                failure, after queued files have been cancelled.
        """
        validate_batch_options(cmd)

        started = time.perf_counter()
        stats = ProcessingStats()
        chunks: list[FileChunk] = []

        logger.info(
            "Chunking %d files (max_tokens=%d, model=%s, concurrency=%d)",
            len(cmd.file_paths),
            cmd.max_tokens,
            cmd.model_name,
            cmd.concurrency,
        )

        with ThreadPoolExecutor(max_workers=cmd.concurrency) as pool:
            futures = [pool.submit(self._process_one, path, cmd) for path in cmd.file_paths]
            for future in as_completed(futures):
                outcome = future.result()
                if outcome.ok:
                    stats.files_processed += 1
                    stats.chunks_created += len(outcome.chunks)
                    chunks.extend(outcome.chunks)
                    continue

                error = cast(ProcessingError, outcome.error)
                stats.errors.append(error)
                if not cmd.continue_on_error:
                    logger.error("Aborting batch: %s", error.message)
                    pool.shutdown(wait=False, cancel_futures=True)
                    if outcome.cause is not None:
                        raise outcome.cause
                    raise RuntimeError(error.message)
                logger.warning(
                    "Skipping %s (%s): %s", outcome.file_path, error.kind, error.message
                )

        chunks.sort(key=lambda c: (str(c.file_path), c.span.start_line))
        elapsed = time.perf_counter() - started

        logger.info(
            "Chunked %d files into %d chunks in %.2fs (%d errors)",
            stats.files_processed,
            stats.chunks_created,
            elapsed,
            len(stats.errors),
        )
        return BatchResult(stats=stats, chunks=chunks, elapsed_seconds=elapsed)

    def _process_one(self, path: FilePath, cmd: BatchProcessCommand) -> FileOutcome:
        try:
            file_chunks = self.chunk_file.execute(
                ChunkFileCommand(
                    file_path=path,
                    max_tokens=cmd.max_tokens,
                    model_name=cmd.model_name,
                )
            )
        except Exception as e:
            error = ProcessingError.from_exception(
                e, path, recoverable=cmd.continue_on_error
            )
            return FileOutcome(file_path=path, error=error, cause=e)
        return FileOutcome(file_path=path, chunks=tuple(file_chunks))
