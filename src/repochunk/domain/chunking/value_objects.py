"""Value objects for the chunking bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from repochunk.shared.exceptions import ChunkingError
from repochunk.shared.types import (
    ErrorKind,
    FilePath,
    OriginKind,
    Position,
    SourceSpan,
    TokenCount,
)

# =============================================================================
# ENUMS
# =============================================================================


class SymbolKind(StrEnum):
    """Kind of code symbol resolved from a syntax node."""

    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    NAMESPACE = "namespace"
    MODULE = "module"
    STRUCT = "struct"
    TRAIT = "trait"
    IMPL = "impl"
    VARIABLE = "variable"
    IMPORT = "import"
    EXPORT = "export"


# =============================================================================
# SYNTAX SNAPSHOTS
# =============================================================================


@dataclass(frozen=True)
class ASTNode:
    """An owned snapshot of one syntax node.

    Copied out of the parse tree so nothing downstream depends on the
    tree's lifetime. ``symbol_kind`` falls back to the raw node kind when
    the kind has no entry in the symbol table.
    """

    kind: str
    start_position: Position
    end_position: Position
    text: str
    symbol_name: str | None = None
    symbol_kind: str | None = None
    lineage: tuple[str, ...] = ()

    @property
    def start_line(self) -> int:
        return self.start_position.row + 1

    @property
    def end_line(self) -> int:
        # A node whose text ends with a newline reports its end at column 0
        # of the following row; that row holds none of the node's text.
        if self.end_position.column == 0 and self.end_position.row > self.start_position.row:
            return self.end_position.row
        return self.end_position.row + 1

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(start_line=self.start_line, end_line=self.end_line)


@dataclass(frozen=True)
class CodeGap:
    """Source lines not covered by any collected node."""

    content: str
    span: SourceSpan


@dataclass(frozen=True)
class CoveredNode:
    """A collected node as placed by the compositor.

    ``content`` is the full source text of ``span``, which may be clipped
    when the node shares its first lines with a preceding unit.
    """

    node: ASTNode
    content: str
    span: SourceSpan


CoverageUnit = CoveredNode | CodeGap


@dataclass(frozen=True)
class CodeSplit:
    """A sub-unit of a node or gap that satisfies the token budget."""

    content: str
    span: SourceSpan
    token_count: TokenCount


# =============================================================================
# CHUNKS
# =============================================================================


@dataclass(frozen=True)
class ChunkMetadata:
    """Retrieval metadata attached to every chunk."""

    file_path: FilePath
    language: str
    origin_kind: OriginKind
    span: SourceSpan
    symbol_name: str | None = None
    symbol_kind: str | None = None
    lineage: tuple[str, ...] = ()
    imports: frozenset[str] = frozenset()
    exports: frozenset[str] = frozenset()

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict."""
        return {
            "file_path": str(self.file_path),
            "language": self.language,
            "origin_kind": self.origin_kind.value,
            "start_line": self.span.start_line,
            "end_line": self.span.end_line,
            "symbol_name": self.symbol_name,
            "symbol_kind": self.symbol_kind,
            "lineage": list(self.lineage),
            "imports": sorted(self.imports),
            "exports": sorted(self.exports),
        }


@dataclass(frozen=True)
class FileChunk:
    """The unit delivered to downstream indexing."""

    content: str
    metadata: ChunkMetadata
    span: SourceSpan
    token_count: TokenCount

    @property
    def file_path(self) -> FilePath:
        return self.metadata.file_path

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict."""
        return {
            "content": self.content,
            "token_count": int(self.token_count),
            "metadata": self.metadata.to_dict(),
        }


# =============================================================================
# ERRORS AND STATISTICS
# =============================================================================


@dataclass(frozen=True)
class ProcessingError:
    """A recorded per-file failure."""

    kind: ErrorKind
    message: str
    recoverable: bool
    file_path: FilePath | None = None

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        file_path: FilePath | None = None,
        *,
        recoverable: bool | None = None,
    ) -> ProcessingError:
        """Build a record from a raised exception.

        Non-chunking exceptions are classified as parsing failures.
        """
        if isinstance(exc, ChunkingError):
            return cls(
                kind=exc.kind,
                message=exc.message,
                recoverable=exc.recoverable if recoverable is None else recoverable,
                file_path=exc.path or file_path,
            )
        return cls(
            kind=ErrorKind.PARSING,
            message=str(exc) or type(exc).__name__,
            recoverable=True if recoverable is None else recoverable,
            file_path=file_path,
        )


@dataclass(frozen=True)
class ErrorSummary:
    """Error counts for an operator-facing report."""

    total: int
    by_kind: dict[ErrorKind, int]
    recoverable: int
    non_recoverable: int


@dataclass
class ProcessingStats:
    """Aggregate counts for one batch run.

    Not frozen: the orchestrator accumulates into it while consuming
    completed files, then hands it to the caller.
    """

    files_processed: int = 0
    chunks_created: int = 0
    errors: list[ProcessingError] = field(default_factory=list[ProcessingError])

    def errors_by_kind(self) -> dict[ErrorKind, list[ProcessingError]]:
        """Group the collected errors by kind, every kind present as a key."""
        grouped: dict[ErrorKind, list[ProcessingError]] = {kind: [] for kind in ErrorKind}
        for error in self.errors:
            grouped[error.kind].append(error)
        return grouped

    def summary(self) -> ErrorSummary:
        """Count errors overall, per kind, and by recoverability."""
        recoverable = sum(1 for e in self.errors if e.recoverable)
        return ErrorSummary(
            total=len(self.errors),
            by_kind={kind: len(errs) for kind, errs in self.errors_by_kind().items()},
            recoverable=recoverable,
            non_recoverable=len(self.errors) - recoverable,
        )
