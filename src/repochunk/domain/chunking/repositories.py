"""Collaborator protocols for the chunking bounded context."""

from __future__ import annotations

from typing import Protocol

from repochunk.domain.chunking.value_objects import ASTNode
from repochunk.shared.types import FilePath

# =============================================================================
# PROTOCOLS
# =============================================================================


class SourceParser(Protocol):
    """Interface for turning source text into collected syntax nodes."""

    def language_for(self, path: FilePath) -> str | None:
        """Return the display language for *path*, or None if unsupported."""
        ...

    def extract_nodes(self, path: FilePath, content: str) -> list[ASTNode]:
        """Parse a source file and collect its chunkable nodes.

        Args:
            path: Path of the file, used to pick the grammar.
            content: Raw source code content.

        Returns:
            Node snapshots with symbol information, sorted by start position.

        Raises:
            ParsingError: If the file cannot be parsed.
        """
        ...
