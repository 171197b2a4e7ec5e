"""Token counting backed by tiktoken encodings."""

from __future__ import annotations

import logging

import tiktoken

from repochunk.infrastructure.constants import MODEL_TO_ENCODING
from repochunk.shared.constants import DEFAULT_ENCODING, DEFAULT_MODEL
from repochunk.shared.exceptions import TokenProcessingError

logger = logging.getLogger(__name__)


def encoding_name_for_model(model_name: str) -> str:
    """Map a model name to its encoding, falling back to the default."""
    return MODEL_TO_ENCODING.get(model_name, DEFAULT_ENCODING)


class TiktokenTokenizer:
    """Counts tokens for one embedding model.

    Instances are meant for a single worker; build one per file and call
    :meth:`dispose` when done.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL) -> None:
        self.model_name = model_name
        self.encoding_name = encoding_name_for_model(model_name)
        if model_name not in MODEL_TO_ENCODING:
            logger.debug(
                "Unknown model %r, counting with %s", model_name, self.encoding_name
            )
        try:
            self._encoding: tiktoken.Encoding | None = tiktoken.get_encoding(
                self.encoding_name
            )
        except Exception as e:
            msg = f"failed to load encoding {self.encoding_name!r}: {e}"
            raise TokenProcessingError(msg) from e

    def count_tokens(self, text: str) -> int:
        """Count tokens in *text*. Blank text counts as zero."""
        if not text.strip():
            return 0
        if self._encoding is None:
            msg = "tokenizer has been disposed"
            raise TokenProcessingError(msg)
        try:
            return len(self._encoding.encode(text, disallowed_special=()))
        except Exception as e:
            msg = f"failed to count tokens: {e}"
            raise TokenProcessingError(msg) from e

    def dispose(self) -> None:
        """Drop the encoding reference."""
        self._encoding = None


def count_tokens(text: str, model_name: str = DEFAULT_MODEL) -> int:
    """One-shot token count with a throwaway tokenizer."""
    tokenizer = TiktokenTokenizer(model_name)
    try:
        return tokenizer.count_tokens(text)
    finally:
        tokenizer.dispose()
