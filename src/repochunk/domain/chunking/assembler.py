"""Turns coverage units into budget-conforming file chunks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from repochunk.domain.chunking.imports import extract_imports_exports
from repochunk.domain.chunking.splitter import TokenAwareSplitter
from repochunk.domain.chunking.tokenizer import TokenCounter
from repochunk.domain.chunking.value_objects import (
    ChunkMetadata,
    CoverageUnit,
    CoveredNode,
    FileChunk,
)
from repochunk.shared.exceptions import InvalidBudgetError
from repochunk.shared.types import FilePath, OriginKind, TokenCount

# =============================================================================
# ASSEMBLER
# =============================================================================


@dataclass
class ChunkAssembler:
    """Measures each unit and splits the ones over budget."""

    tokenizer: TokenCounter

    def assemble(
        self,
        units: Iterable[CoverageUnit],
        file_path: FilePath,
        language: str,
        max_tokens: int,
    ) -> list[FileChunk]:
        """Build the chunks for one file.

        Args:
            units: Compositor output, in line order.
            file_path: Path recorded in every chunk's metadata.
            language: Display name of the file's language.
            max_tokens: Token budget per chunk.

        Returns:
            Chunks in line order. Units within budget map to one chunk each;
            larger units map to one chunk per split, all carrying the unit's
            symbol metadata.

        Raises:
            InvalidBudgetError: If ``max_tokens`` is not positive.
        """
        if max_tokens <= 0:
            raise InvalidBudgetError(max_tokens)

        splitter = TokenAwareSplitter(tokenizer=self.tokenizer)
        chunks: list[FileChunk] = []

        for unit in units:
            metadata = self._unit_metadata(unit, file_path, language)
            token_count = TokenCount(self.tokenizer.count_tokens(unit.content))

            if token_count <= max_tokens:
                chunks.append(
                    FileChunk(
                        content=unit.content,
                        metadata=metadata,
                        span=unit.span,
                        token_count=token_count,
                    )
                )
                continue

            for split in splitter.split(unit.content, unit.span.start_line, max_tokens):
                chunks.append(
                    FileChunk(
                        content=split.content,
                        metadata=replace(
                            metadata, origin_kind=OriginKind.SPLIT, span=split.span
                        ),
                        span=split.span,
                        token_count=split.token_count,
                    )
                )

        return chunks

    @staticmethod
    def _unit_metadata(
        unit: CoverageUnit, file_path: FilePath, language: str
    ) -> ChunkMetadata:
        found = extract_imports_exports(unit.content, language)
        if isinstance(unit, CoveredNode):
            return ChunkMetadata(
                file_path=file_path,
                language=language,
                origin_kind=OriginKind.NODE,
                span=unit.span,
                symbol_name=unit.node.symbol_name,
                symbol_kind=unit.node.symbol_kind,
                lineage=unit.node.lineage,
                imports=found.imports,
                exports=found.exports,
            )
        return ChunkMetadata(
            file_path=file_path,
            language=language,
            origin_kind=OriginKind.GAP,
            span=unit.span,
            imports=found.imports,
            exports=found.exports,
        )
