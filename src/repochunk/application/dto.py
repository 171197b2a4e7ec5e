"""Application-layer command and result DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field

from repochunk.domain.chunking.value_objects import (
    FileChunk,
    ProcessingError,
    ProcessingStats,
)
from repochunk.shared.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONTINUE_ON_ERROR,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
)
from repochunk.shared.types import FilePath

# =============================================================================
# CHUNK FILE
# =============================================================================


@dataclass(frozen=True)
class ChunkFileCommand:
    """Command to chunk a single source file."""

    file_path: FilePath
    max_tokens: int = DEFAULT_MAX_TOKENS
    model_name: str = DEFAULT_MODEL


@dataclass(frozen=True)
class FileOutcome:
    """What happened to one file: its chunks, or the error that stopped it."""

    file_path: FilePath
    chunks: tuple[FileChunk, ...] = ()
    error: ProcessingError | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# BATCH PROCESS
# =============================================================================


@dataclass(frozen=True)
class BatchProcessCommand:
    """Command to chunk many files with a bounded worker pool."""

    file_paths: tuple[FilePath, ...]
    max_tokens: int = DEFAULT_MAX_TOKENS
    model_name: str = DEFAULT_MODEL
    concurrency: int = DEFAULT_CONCURRENCY
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR


@dataclass(frozen=True)
class BatchResult:
    """Result of a batch run."""

    stats: ProcessingStats
    chunks: list[FileChunk] = field(default_factory=list[FileChunk])
    elapsed_seconds: float = 0.0
