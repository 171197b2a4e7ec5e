"""Chunk File use case."""

from __future__ import annotations

import logging

from dataclasses import dataclass
from pathlib import Path

from repochunk.application.dto import ChunkFileCommand
from repochunk.domain.chunking.assembler import ChunkAssembler
from repochunk.domain.chunking.coverage import compose
from repochunk.domain.chunking.repositories import SourceParser
from repochunk.domain.chunking.tokenizer import TokenCounter, TokenCounterFactory
from repochunk.domain.chunking.value_objects import FileChunk
from repochunk.shared.exceptions import (
    ChunkingError,
    FileSystemError,
    InvalidBudgetError,
    ParsingError,
    TokenProcessingError,
)
from repochunk.shared.types import FilePath

logger = logging.getLogger(__name__)

# =============================================================================
# USE CASE
# =============================================================================


@dataclass
class ChunkFile:
    """Read, parse, compose and assemble one file into chunks."""

    parser: SourceParser
    tokenizer_factory: TokenCounterFactory

    def execute(self, cmd: ChunkFileCommand) -> list[FileChunk]:
        """Chunk a single file.

        Args:
            cmd: The file to chunk, its token budget and the model whose
                encoding measures the budget.

        Returns:
            Chunks in line order. Unsupported and blank files give an empty
            list.

        Raises:
            InvalidBudgetError: If ``max_tokens`` is not positive.
            FileSystemError: If the file cannot be read as UTF-8 text.
            ParsingError: If parsing or composition fails unexpectedly.
            TokenProcessingError: If the encoder cannot be created or fails
                while chunks are measured.
        """
        if cmd.max_tokens <= 0:
            raise InvalidBudgetError(cmd.max_tokens)

        path = cmd.file_path
        language = self.parser.language_for(path)
        if language is None:
            logger.debug("Skipping unsupported file %s", path)
            return []

        content = _read_source(path)
        if not content.strip():
            return []

        tokenizer = self._acquire_tokenizer(cmd.model_name, path)
        try:
            try:
                nodes = self.parser.extract_nodes(path, content)
                units = compose(content, nodes)
            except ChunkingError:
                raise
            except Exception as e:
                raise ParsingError(f"unexpected failure: {e}", path) from e

            try:
                chunks = ChunkAssembler(tokenizer=tokenizer).assemble(
                    units, path, language, cmd.max_tokens
                )
            except ChunkingError:
                raise
            except Exception as e:
                raise TokenProcessingError(f"failed to count tokens: {e}", path) from e
        finally:
            tokenizer.dispose()

        logger.debug("Chunked %s into %d chunks", path, len(chunks))
        return chunks

    def _acquire_tokenizer(self, model_name: str, path: FilePath) -> TokenCounter:
        try:
            return self.tokenizer_factory(model_name)
        except TokenProcessingError as e:
            raise TokenProcessingError(e.message, path) from e
        except Exception as e:
            raise TokenProcessingError(f"failed to create tokenizer: {e}", path) from e


def _read_source(path: FilePath) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"failed to read file: {e}", path) from e
