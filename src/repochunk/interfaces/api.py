"""Library entry points wired to the default tree-sitter and tiktoken stack."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import Path

from repochunk.application.batch_process import BatchProcessor, validate_batch_options
from repochunk.application.chunk_file import ChunkFile
from repochunk.application.dto import BatchProcessCommand, BatchResult, ChunkFileCommand
from repochunk.domain.chunking.value_objects import FileChunk
from repochunk.infrastructure.discovery.repository_scanner import scan_repository
from repochunk.infrastructure.parsing.tree_sitter_parser import TreeSitterParser
from repochunk.infrastructure.tokenization.tiktoken_tokenizer import TiktokenTokenizer
from repochunk.shared.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONTINUE_ON_ERROR,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
)
from repochunk.shared.types import FilePath


def build_chunk_file(*, tolerate_syntax_errors: bool = False) -> ChunkFile:
    """Wire the ChunkFile use case with the default collaborators."""
    return ChunkFile(
        parser=TreeSitterParser(tolerate_syntax_errors=tolerate_syntax_errors),
        tokenizer_factory=TiktokenTokenizer,
    )


def chunk_file(
    file_path: str | Path,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    model_name: str = DEFAULT_MODEL,
    *,
    tolerate_syntax_errors: bool = False,
) -> list[FileChunk]:
    """Chunk one source file.

    Returns an empty list for unsupported extensions and blank files.

    Raises:
        InvalidBudgetError: If ``max_tokens`` is not positive.
        ChunkingError: If the file cannot be read, parsed or measured.
    """
    use_case = build_chunk_file(tolerate_syntax_errors=tolerate_syntax_errors)
    return use_case.execute(
        ChunkFileCommand(
            file_path=FilePath(str(file_path)),
            max_tokens=max_tokens,
            model_name=model_name,
        )
    )


def batch_process(
    root_or_files: str | Path | Iterable[str | Path],
    max_tokens: int = DEFAULT_MAX_TOKENS,
    model_name: str = DEFAULT_MODEL,
    concurrency: int = DEFAULT_CONCURRENCY,
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    *,
    extensions: Collection[str] | None = None,
    exclude_patterns: Collection[str] = (),
    tolerate_syntax_errors: bool = False,
) -> BatchResult:
    """Chunk a repository directory or an explicit list of files.

    A single path naming a directory is scanned for source files; anything
    else is taken as the file list. Options are validated before scanning.
    """
    if isinstance(root_or_files, (str, Path)):
        targets: list[str | Path] = [root_or_files]
    else:
        targets = list(root_or_files)

    cmd = BatchProcessCommand(
        file_paths=(),
        max_tokens=max_tokens,
        model_name=model_name,
        concurrency=concurrency,
        continue_on_error=continue_on_error,
    )
    validate_batch_options(cmd)

    if len(targets) == 1 and Path(targets[0]).is_dir():
        file_paths = scan_repository(targets[0], extensions, exclude_patterns)
    else:
        file_paths = [FilePath(str(t)) for t in targets]

    processor = BatchProcessor(
        chunk_file=build_chunk_file(tolerate_syntax_errors=tolerate_syntax_errors)
    )
    return processor.run(
        BatchProcessCommand(
            file_paths=tuple(file_paths),
            max_tokens=max_tokens,
            model_name=model_name,
            concurrency=concurrency,
            continue_on_error=continue_on_error,
        )
    )
