"""Token counter protocol consumed by the splitter and assembler."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class TokenCounter(Protocol):
    """Interface for model-specific token counting encoders."""

    def count_tokens(self, text: str) -> int:
        """Count the encoder tokens in *text*.

        Args:
            text: Arbitrary text.

        Returns:
            A non-negative token count.

        Raises:
            TokenProcessingError: If the encoder fails.
        """
        ...

    def dispose(self) -> None:
        """Release encoder resources. The counter is unusable afterwards."""
        ...


TokenCounterFactory = Callable[[str], TokenCounter]
"""Builds a fresh counter for a model name."""
