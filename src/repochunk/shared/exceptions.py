"""Typed exception hierarchy for repochunk."""

from __future__ import annotations

from repochunk.shared.types import ErrorKind, FilePath

# =============================================================================
# BASE
# =============================================================================


class RepochunkError(Exception):
    """Base exception for all repochunk errors."""


# =============================================================================
# CHUNKING
# =============================================================================


class ChunkingError(RepochunkError):
    """A failure while chunking a single file.

    Carries the error category, the originating file (when known) and
    whether a batch run may continue past it.
    """

    kind: ErrorKind = ErrorKind.PARSING

    def __init__(
        self,
        message: str,
        path: FilePath | None = None,
        *,
        recoverable: bool = True,
    ) -> None:
        self.message = message
        self.path = path
        self.recoverable = recoverable
        super().__init__(message if path is None else f"{path}: {message}")


class FileSystemError(ChunkingError):
    """A file could not be read or a directory could not be scanned."""

    kind = ErrorKind.FILE_SYSTEM


class ParsingError(ChunkingError):
    """A syntax tree could not be built or reconciled with the source lines."""

    kind = ErrorKind.PARSING


class TokenProcessingError(ChunkingError):
    """The encoder failed to initialise or to count tokens."""

    kind = ErrorKind.TOKEN_PROCESSING


class InvalidBudgetError(TokenProcessingError):
    """A token budget of zero or less was supplied."""

    def __init__(self, max_tokens: int) -> None:
        self.max_tokens = max_tokens
        super().__init__(
            f"max_tokens must be greater than 0, got {max_tokens}",
            recoverable=False,
        )


class DatabaseError(ChunkingError):
    """Reserved for downstream persistence collaborators."""

    kind = ErrorKind.DATABASE


# =============================================================================
# CONFIGURATION
# =============================================================================


class ConfigurationError(RepochunkError):
    """Invalid or missing configuration."""
