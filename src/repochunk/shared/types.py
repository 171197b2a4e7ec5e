"""Domain-specific types that prevent primitive obsession."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# =============================================================================
# NEWTYPES
# =============================================================================


class FilePath(str):
    """A path to a source file, as handed in by the caller."""


class TokenCount(int):
    """A count of encoder tokens."""

    def __add__(self, other: object) -> TokenCount:
        if isinstance(other, int):
            return TokenCount(int.__add__(self, other))
        return NotImplemented

    def __sub__(self, other: object) -> TokenCount:
        if isinstance(other, int):
            return TokenCount(int.__sub__(self, other))
        return NotImplemented


# =============================================================================
# VALUE OBJECTS
# =============================================================================


@dataclass(frozen=True, order=True)
class SourceSpan:
    """An inclusive, 1-based range of line numbers within a file."""

    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start_line < 1:
            msg = f"start_line must be >= 1, got {self.start_line}"
            raise ValueError(msg)
        if self.start_line > self.end_line:
            msg = (
                f"start_line ({self.start_line}) must not exceed "
                f"end_line ({self.end_line})"
            )
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end_line - self.start_line + 1

    def __contains__(self, line: object) -> bool:
        if isinstance(line, int):
            return self.start_line <= line <= self.end_line
        return NotImplemented

    def overlaps(self, other: SourceSpan) -> bool:
        """Whether the two spans share at least one line."""
        return self.start_line <= other.end_line and other.start_line <= self.end_line


@dataclass(frozen=True)
class Position:
    """A 0-based row/column position as reported by the parser."""

    row: int
    column: int


# =============================================================================
# ENUMS
# =============================================================================


class ErrorKind(StrEnum):
    """Category of a per-file processing failure."""

    FILE_SYSTEM = "file_system"
    PARSING = "parsing"
    TOKEN_PROCESSING = "token_processing"
    DATABASE = "database"


class OriginKind(StrEnum):
    """How a chunk was produced."""

    NODE = "node"
    GAP = "gap"
    SPLIT = "split"
